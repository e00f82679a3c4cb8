"""Service for multi-provider fact checking with majority consensus."""

import logging
from typing import List, Optional, Sequence

from ...observability import bind_request, event_fields
from ..exceptions import AllProvidersFailedError
from ..models.fact_check import AnalysisPayload, FactCheckResult, ModelAnalysis
from ..models.provider_call import ProviderCall
from .consensus_voter import vote
from .fan_out_executor import FanOutExecutor, successful

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS = ("openai", "anthropic", "gemini")

SYSTEM_PROMPT = """
You are a professional fact-checker working for a news organisation.
Assess the credibility of the claim you are given.
Respond ONLY with a JSON object of the form:
{
    "verdict": "credible" | "questionable" | "false",
    "confidence": <number from 0 to 100>,
    "reasoning": "Brief explanation (max 500 chars)",
    "redFlags": ["Warning signs such as missing sources or sensational wording"]
}
"""


def render_prompt(claim: str, context: Optional[str] = None) -> str:
    """Build the user prompt for a claim."""
    prompt = f"Claim: {claim.strip()}"
    if context and context.strip():
        prompt += f"\nContext: {context.strip()}"
    return prompt


class FactCheckingService:
    """Fact check a claim by polling several independent providers.

    Every provider answers the same question; valid answers are reduced by
    majority vote. Providers that time out, error or return malformed
    output are dropped, and the request only fails when none are left.
    """

    def __init__(
        self,
        executor: FanOutExecutor,
        providers: Sequence[str] = DEFAULT_PROVIDERS,
        timeout: float = 30.0,
    ):
        """Initialize the service.

        Args:
            executor: Fan-out executor holding the provider adapters
            providers: Providers polled for every claim
            timeout: Per-call deadline in seconds
        """
        if not providers:
            raise ValueError("At least one fact-check provider is required")
        self._executor = executor
        self._providers = list(providers)
        self._timeout = timeout
        logger.info(f"🔧 FactCheckingService initialized with providers: {', '.join(self._providers)}")

    def build_calls(self, claim: str, context: Optional[str] = None) -> List[ProviderCall]:
        """One identical analysis call per provider."""
        prompt = render_prompt(claim, context)
        return [
            ProviderCall(
                provider=name,
                prompt=prompt,
                system_prompt=SYSTEM_PROMPT,
                timeout=self._timeout,
                facet="verdict",
                response_model=AnalysisPayload,
            )
            for name in self._providers
        ]

    async def check_fact_accuracy(self, claim: str, context: Optional[str] = None) -> FactCheckResult:
        """Fact check a claim.

        Args:
            claim: Statement to check
            context: Optional surrounding context

        Returns:
            Consensus fact check result

        Raises:
            ValueError: If the claim is blank
            AllProvidersFailedError: If no provider returned a valid analysis
        """
        if not claim or not claim.strip():
            raise ValueError("Claim cannot be empty")

        with bind_request():
            logger.info(
                f"🔍 Starting fact check for claim: {claim[:100]}...",
                extra=event_fields("fact_check_started"),
            )
            calls = self.build_calls(claim, context)
            outcomes = await self._executor.run(calls)

            analyses = [
                ModelAnalysis.from_payload(outcome.provider, outcome.data)
                for outcome in successful(outcomes)
            ]
            if not analyses:
                logger.error(
                    f"❌ Fact check failed: none of {len(calls)} providers returned a valid analysis",
                    extra=event_fields("fact_check_failed", attempted=len(calls)),
                )
                raise AllProvidersFailedError()

            decision = vote(analyses, expected=len(calls))
            logger.info(
                f"✅ Fact check complete: {decision.overall_verdict.value} "
                f"({decision.confidence_score}%) - {decision.consensus}",
                extra=event_fields("fact_check_completed", valid_analyses=len(analyses)),
            )
            return FactCheckResult(
                overall_verdict=decision.overall_verdict,
                confidence_score=decision.confidence_score,
                models=analyses,
                consensus=decision.consensus,
                recommendations=decision.recommendations,
            )
