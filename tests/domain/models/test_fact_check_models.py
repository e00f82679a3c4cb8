"""Tests for fact-check domain models."""

import pytest
from pydantic import ValidationError

from newsroom_consensus.domain.models.fact_check import (
    AnalysisPayload,
    FactCheckResult,
    ModelAnalysis,
    Verdict,
)


def test_payload_normalizes_verdict_and_aliases():
    payload = AnalysisPayload.model_validate(
        {"verdict": "FALSE ", "confidence": "85", "redFlags": ["clickbait", ""]}
    )

    assert payload.verdict == Verdict.FALSE
    assert payload.confidence == 85.0
    assert payload.red_flags == ["clickbait"]


@pytest.mark.parametrize("value,expected", [(150, 100.0), (-3, 0.0), (42.5, 42.5)])
def test_payload_clamps_confidence(value, expected):
    payload = AnalysisPayload(verdict="credible", confidence=value)

    assert payload.confidence == expected


@pytest.mark.parametrize(
    "data",
    [
        {"verdict": "probably", "confidence": 50},
        {"verdict": "credible", "confidence": None},
        {"verdict": "credible", "confidence": True},
        {"verdict": "credible", "confidence": "high"},
        {"verdict": "credible", "confidence": float("nan")},
    ],
)
def test_payload_rejects_invalid(data):
    with pytest.raises(ValidationError):
        AnalysisPayload.model_validate(data)


def test_model_analysis_to_dict():
    payload = AnalysisPayload(verdict="questionable", confidence=55, reasoning="Unsourced", redFlags=["no byline"])

    analysis = ModelAnalysis.from_payload("anthropic", payload)

    assert analysis.to_dict() == {
        "provider": "anthropic",
        "verdict": "questionable",
        "confidence": 55.0,
        "reasoning": "Unsourced",
        "redFlags": ["no byline"],
    }


def test_fact_check_result_validation():
    """Test that results need models and a bounded score."""
    analysis = ModelAnalysis(provider="openai", verdict=Verdict.CREDIBLE, confidence=90)

    with pytest.raises(ValueError):
        FactCheckResult(overall_verdict=Verdict.CREDIBLE, confidence_score=90, models=[], consensus="")

    with pytest.raises(ValueError):
        FactCheckResult(overall_verdict=Verdict.CREDIBLE, confidence_score=101, models=[analysis], consensus="")


def test_fact_check_result_to_dict():
    analysis = ModelAnalysis(provider="openai", verdict=Verdict.CREDIBLE, confidence=90)
    result = FactCheckResult(
        overall_verdict=Verdict.QUESTIONABLE,
        confidence_score=90,
        models=[analysis],
        consensus="Only 1 valid analysis",
        recommendations=["Verify the claim against primary sources"],
    )

    assert result.to_dict() == {
        "overallVerdict": "questionable",
        "confidenceScore": 90,
        "models": [analysis.to_dict()],
        "consensus": "Only 1 valid analysis",
        "recommendations": ["Verify the claim against primary sources"],
    }
