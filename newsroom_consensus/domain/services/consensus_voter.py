"""Majority voting over redundant fact-check analyses."""

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..exceptions import AllProvidersFailedError
from ..models.fact_check import ModelAnalysis, Verdict

LOW_CONFIDENCE_THRESHOLD = 60

BASE_RECOMMENDATIONS = [
    "Verify the claim against primary sources",
    "Cross-check the claim with reputable news outlets",
]

VERDICT_RECOMMENDATIONS = {
    Verdict.CREDIBLE: "Cite the supporting sources when publishing",
    Verdict.QUESTIONABLE: "Flag the claim for editorial review before publication",
    Verdict.FALSE: "Do not publish the claim without a clear correction",
}

EXPERT_RECOMMENDATION = "Consult a domain expert before publishing"
RED_FLAG_RECOMMENDATION = "Investigate the red flags raised by the AI models"


@dataclass
class ConsensusDecision:
    """Outcome of a vote."""

    overall_verdict: Verdict
    confidence_score: int
    consensus: str
    recommendations: List[str] = field(default_factory=list)
    tally: Dict[Verdict, int] = field(default_factory=dict)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5))


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop exact-string duplicates, keeping first occurrences in order."""
    seen = set()
    unique = []
    for item in items:
        if item not in seen:
            seen.add(item)
            unique.append(item)
    return unique


def tally_verdicts(analyses: List[ModelAnalysis]) -> Dict[Verdict, int]:
    """Count votes for each verdict, including verdicts with no votes."""
    tally = {verdict: 0 for verdict in Verdict}
    for analysis in analyses:
        tally[analysis.verdict] += 1
    return tally


def has_majority(tally: Dict[Verdict, int]) -> bool:
    """Whether a single verdict leads with at least two votes."""
    best = max(tally.values(), default=0)
    leaders = [verdict for verdict, votes in tally.items() if votes == best]
    return best >= 2 and len(leaders) == 1


def decide_verdict(tally: Dict[Verdict, int]) -> Verdict:
    """Pick the majority verdict.

    The most voted verdict wins when it has at least two votes and no
    other verdict ties it. Anything else falls back to ``questionable``.
    """
    if has_majority(tally):
        return max(tally, key=tally.get)
    return Verdict.QUESTIONABLE


def average_confidence(analyses: List[ModelAnalysis]) -> int:
    """Mean confidence of the valid analyses only."""
    if not analyses:
        raise AllProvidersFailedError()
    return round_half_up(math.fsum(a.confidence for a in analyses) / len(analyses))


def describe_consensus(
    verdict: Verdict,
    tally: Dict[Verdict, int],
    valid: int,
    expected: Optional[int] = None,
) -> str:
    """Human-readable agreement statement against the valid analysis count."""
    if valid == 1:
        only = next(v for v, votes in tally.items() if votes)
        statement = f"Only 1 valid analysis ({only.value}); no majority possible, defaulting to {verdict.value}"
    elif not has_majority(tally):
        breakdown = ", ".join(f"{votes} {v.value}" for v, votes in tally.items() if votes)
        statement = f"No majority among {valid} models ({breakdown}); defaulting to {verdict.value}"
    elif tally[verdict] == valid:
        statement = f"All {valid} models agree the claim is {verdict.value}"
    else:
        statement = f"{tally[verdict]} of {valid} models agree the claim is {verdict.value}"

    if expected is not None and expected > valid:
        statement += f" ({expected - valid} of {expected} providers returned no valid analysis)"
    return statement


def build_recommendations(
    verdict: Verdict,
    confidence_score: int,
    analyses: List[ModelAnalysis],
) -> List[str]:
    """Investigative next steps for the editor."""
    recommendations = list(BASE_RECOMMENDATIONS)
    recommendations.append(VERDICT_RECOMMENDATIONS[verdict])
    if confidence_score < LOW_CONFIDENCE_THRESHOLD:
        recommendations.append(EXPERT_RECOMMENDATION)
    if any(analysis.red_flags for analysis in analyses):
        recommendations.append(RED_FLAG_RECOMMENDATION)
    return dedupe(recommendations)


def vote(analyses: List[ModelAnalysis], expected: Optional[int] = None) -> ConsensusDecision:
    """Reduce valid analyses to one decision.

    The reduction only depends on the multiset of analyses, so the order
    in which providers answered does not change the result.

    Args:
        analyses: Analyses that survived extraction
        expected: Number of providers that were asked

    Returns:
        The consensus decision

    Raises:
        AllProvidersFailedError: If there is nothing to vote on
    """
    if not analyses:
        raise AllProvidersFailedError()

    tally = tally_verdicts(analyses)
    verdict = decide_verdict(tally)
    confidence = average_confidence(analyses)
    return ConsensusDecision(
        overall_verdict=verdict,
        confidence_score=confidence,
        consensus=describe_consensus(verdict, tally, len(analyses), expected),
        recommendations=build_recommendations(verdict, confidence, analyses),
        tally=tally,
    )
