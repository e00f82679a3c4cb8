"""Settle-all concurrent execution of provider calls."""

import asyncio
import logging
import time
from typing import List, Mapping, Optional

from ...observability import event_fields
from ..exceptions import ExtractionError
from ..models.provider_call import FailureKind, ProviderCall, ProviderOutcome
from ..ports.ai_provider import AIProvider
from .structured_extractor import extract

logger = logging.getLogger(__name__)


class FanOutExecutor:
    """Run provider calls concurrently and wait for every one of them to settle.

    A failing call never cancels its siblings: each call is bounded by its
    own deadline and every failure is folded into that call's
    ``ProviderOutcome``. Outcomes are returned in input order and carry the
    call index and provider name, so callers can attribute them without
    relying on completion order.
    """

    def __init__(
        self,
        providers: Mapping[str, AIProvider],
        max_retries: int = 0,
        retry_delay: float = 1.0,
    ):
        """Initialize the executor.

        Args:
            providers: Adapters keyed by provider name
            max_retries: Extra attempts after a transport failure
            retry_delay: Delay between attempts in seconds
        """
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        self._providers = dict(providers)
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    @property
    def provider_names(self) -> List[str]:
        """Names of the providers this executor can dispatch to."""
        return list(self._providers)

    async def run(self, calls: List[ProviderCall]) -> List[ProviderOutcome]:
        """Execute all calls and collect one outcome per call.

        Args:
            calls: Calls to dispatch

        Returns:
            Outcomes in the same order as ``calls``
        """
        if not calls:
            return []

        logger.info(
            f"🚀 Dispatching {len(calls)} provider calls: {', '.join(c.provider for c in calls)}",
            extra=event_fields("fan_out_started", call_count=len(calls)),
        )
        outcomes = await asyncio.gather(
            *(self._settle(index, call) for index, call in enumerate(calls))
        )

        succeeded = sum(1 for outcome in outcomes if outcome.succeeded)
        logger.info(
            f"📊 Fan-out settled: {succeeded}/{len(outcomes)} calls succeeded",
            extra=event_fields("fan_out_settled", succeeded=succeeded, failed=len(outcomes) - succeeded),
        )
        return list(outcomes)

    async def _settle(self, index: int, call: ProviderCall) -> ProviderOutcome:
        """Drive one call to a terminal state, never raising."""
        started = time.perf_counter()
        provider = self._providers.get(call.provider)
        if provider is None:
            outcome = ProviderOutcome.failed(
                call, index, FailureKind.UNAVAILABLE,
                f"Provider '{call.provider}' is not registered",
            )
            self._log_outcome(outcome)
            return outcome

        deadline = started + call.timeout
        attempt = 0
        while True:
            remaining = deadline - time.perf_counter()
            try:
                if remaining <= 0:
                    raise asyncio.TimeoutError()
                payload = await asyncio.wait_for(provider.invoke(call), timeout=remaining)
            except asyncio.TimeoutError:
                outcome = ProviderOutcome.failed(
                    call, index, FailureKind.TIMEOUT,
                    f"No response within {call.timeout:g}s",
                    elapsed_ms=_elapsed_ms(started),
                )
                break
            except asyncio.CancelledError:
                raise
            except Exception as e:
                if attempt < self._max_retries and deadline - time.perf_counter() > self._retry_delay:
                    attempt += 1
                    logger.warning(
                        f"🔁 Retrying {call.provider} after transport error ({attempt}/{self._max_retries}): {e}",
                        extra=event_fields("provider_call_retry", provider=call.provider, attempt=attempt),
                    )
                    await asyncio.sleep(self._retry_delay)
                    continue
                outcome = ProviderOutcome.failed(
                    call, index, FailureKind.TRANSPORT,
                    f"{type(e).__name__}: {e}",
                    elapsed_ms=_elapsed_ms(started),
                )
                break

            outcome = self._validate(call, index, payload, started)
            break

        self._log_outcome(outcome)
        return outcome

    def _validate(self, call: ProviderCall, index: int, payload: str, started: float) -> ProviderOutcome:
        """Apply the call's response model, if any, to a raw payload."""
        if call.response_model is None:
            return ProviderOutcome.success(call, index, payload, elapsed_ms=_elapsed_ms(started))

        try:
            data = extract(payload, call.response_model)
        except ExtractionError as e:
            logger.warning(
                f"🧩 Dropping malformed response from {call.provider}: {e.reason} | excerpt: {e.excerpt!r}",
                extra=event_fields("provider_output_malformed", provider=call.provider, excerpt=e.excerpt),
            )
            return ProviderOutcome.failed(
                call, index, FailureKind.MALFORMED, e.reason,
                elapsed_ms=_elapsed_ms(started),
            )

        return ProviderOutcome.success(call, index, payload, data=data, elapsed_ms=_elapsed_ms(started))

    @staticmethod
    def _log_outcome(outcome: ProviderOutcome) -> None:
        if outcome.succeeded:
            logger.info(
                f"✅ {outcome.provider} answered in {outcome.elapsed_ms:.0f}ms",
                extra=event_fields(
                    "provider_call_succeeded", provider=outcome.provider, elapsed_ms=outcome.elapsed_ms
                ),
            )
        else:
            logger.warning(
                f"⚠️ {outcome.provider} failed ({outcome.failure.value}): {outcome.error}",
                extra=event_fields(
                    "provider_call_failed",
                    provider=outcome.provider,
                    failure_kind=outcome.failure.value,
                    elapsed_ms=outcome.elapsed_ms,
                ),
            )


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def successful(outcomes: List[ProviderOutcome], facet: Optional[str] = None) -> List[ProviderOutcome]:
    """Filter outcomes down to the successful ones, optionally for one facet."""
    return [
        outcome for outcome in outcomes
        if outcome.succeeded and (facet is None or outcome.facet == facet)
    ]
