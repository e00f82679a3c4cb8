"""Extraction of structured JSON payloads from free-text model responses."""

import json
from typing import Any, Dict, Iterator, List, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from ..exceptions import ExtractionError

ModelT = TypeVar("ModelT", bound=BaseModel)

_decoder = json.JSONDecoder()


def _balanced_spans(text: str) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` of every balanced ``{...}`` block, by opening brace.

    One pass over the text with a stack of open brace positions. Inside a
    block, string literals and backslash escapes are honoured so braces in
    JSON strings do not affect depth. Unmatched braces are ignored.
    """
    open_positions: List[int] = []
    spans: List[Tuple[int, int]] = []
    in_string = False
    escaped = False
    for pos, char in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            # Quotes in surrounding prose do not open strings
            in_string = bool(open_positions)
        elif char == "{":
            open_positions.append(pos)
        elif char == "}" and open_positions:
            spans.append((open_positions.pop(), pos))

    yield from sorted(spans)


def find_json_object(text: str) -> Dict[str, Any]:
    """Locate and decode the first balanced JSON object embedded in text.

    Providers routinely wrap their JSON in prose or markdown fences, so
    the text is scanned for brace blocks rather than parsed whole. Each
    candidate is decoded in place, so a bad candidate costs no more than
    the distance to its first syntax error.

    Args:
        text: Raw provider response

    Returns:
        Decoded JSON object

    Raises:
        ExtractionError: If no decodable object is present
    """
    if not text or not text.strip():
        raise ExtractionError("empty response", text or "")

    for start, end in _balanced_spans(text):
        try:
            decoded, stop = _decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            continue
        if isinstance(decoded, dict) and stop == end + 1:
            return decoded

    raise ExtractionError("no JSON object found in response", text)


def extract(raw_text: str, schema: Type[ModelT]) -> ModelT:
    """Extract and validate a structured payload.

    Args:
        raw_text: Raw provider response
        schema: Pydantic model describing the expected shape

    Returns:
        Validated model instance

    Raises:
        ExtractionError: If the payload is missing or violates the schema
    """
    payload = find_json_object(raw_text)
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
            for error in e.errors()
        )
        raise ExtractionError(f"{schema.__name__} validation failed: {problems}", raw_text) from e
