"""Request-scoped logging context for the consensus engine."""

import contextlib
import logging
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional

# Request ID shared by every log record emitted while a facade call runs
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp each record with the active request ID."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get() or "-"
        return True


def new_request_id() -> str:
    """Generate a short request identifier."""
    return uuid.uuid4().hex[:12]


def current_request_id() -> Optional[str]:
    """Get the request ID bound to the running task, if any."""
    return request_id_var.get()


@contextlib.contextmanager
def bind_request(request_id: Optional[str] = None) -> Iterator[str]:
    """Bind a request ID for the duration of the block.

    asyncio tasks created inside the block copy the context, so provider
    calls fanned out from here log under the same ID.

    Args:
        request_id: Explicit ID to bind, generated when omitted

    Yields:
        The bound request ID
    """
    rid = request_id or new_request_id()
    token = request_id_var.set(rid)
    try:
        yield rid
    finally:
        request_id_var.reset(token)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging with request-aware formatting.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    request_filter = RequestContextFilter()
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestContextFilter) for f in handler.filters):
            handler.addFilter(request_filter)


def event_fields(event: str, **fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for a structured log event.

    Args:
        event: Event name
        **fields: Additional event attributes

    Returns:
        Mapping carrying the event name, the active request ID and the fields
    """
    return {"event": event, "request_id": request_id_var.get() or "-", **fields}
