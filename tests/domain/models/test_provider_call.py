"""Tests for provider call and outcome models."""

import pytest
from pydantic import ValidationError

from newsroom_consensus.domain.models.fact_check import AnalysisPayload
from newsroom_consensus.domain.models.provider_call import FailureKind, ProviderCall, ProviderOutcome


@pytest.fixture
def call() -> ProviderCall:
    return ProviderCall(provider="openai", prompt="Claim: x", facet="verdict", response_model=AnalysisPayload)


def test_call_defaults():
    call = ProviderCall(provider="gemini", prompt="hello")

    assert call.timeout == 30.0
    assert call.system_prompt is None
    assert call.response_model is None


def test_call_rejects_non_positive_timeout():
    with pytest.raises(ValidationError):
        ProviderCall(provider="openai", prompt="x", timeout=0)


def test_call_is_immutable(call):
    with pytest.raises(ValidationError):
        call.prompt = "changed"


def test_outcome_success(call):
    outcome = ProviderOutcome.success(call, 2, '{"verdict": "false"}', elapsed_ms=12.5)

    assert outcome.succeeded
    assert outcome.index == 2
    assert outcome.provider == "openai"
    assert outcome.facet == "verdict"
    assert outcome.failure is None


def test_outcome_failure(call):
    outcome = ProviderOutcome.failed(call, 0, FailureKind.TIMEOUT, "No response within 30s")

    assert not outcome.succeeded
    assert outcome.payload is None
    assert outcome.failure == FailureKind.TIMEOUT


def test_outcome_requires_exactly_one_of_payload_or_failure():
    """Test that an outcome is either a success or a failure, never both or neither."""
    with pytest.raises(ValidationError):
        ProviderOutcome(index=0, provider="openai")

    with pytest.raises(ValidationError):
        ProviderOutcome(index=0, provider="openai", payload="{}", failure=FailureKind.MALFORMED)
