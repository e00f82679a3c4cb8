"""Domain models for multi-provider fact checking."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, Field, field_validator


class Verdict(str, Enum):
    """Classification a provider assigns to a claim."""

    CREDIBLE = "credible"
    QUESTIONABLE = "questionable"  # Needs human review
    FALSE = "false"


class AnalysisPayload(BaseModel):
    """Structured answer expected from a fact-check provider."""

    verdict: Verdict = Field(..., description="credible, questionable or false")
    confidence: float = Field(..., description="Confidence in the verdict (0-100)")
    reasoning: str = Field(default="", description="Short justification")
    red_flags: List[str] = Field(default_factory=list, alias="redFlags", description="Warning signs found")

    class Config:
        """Pydantic model configuration."""
        populate_by_name = True

    @field_validator("verdict", mode="before")
    @classmethod
    def normalize_verdict(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("confidence", mode="before")
    @classmethod
    def require_number(cls, value: Any) -> Any:
        if isinstance(value, bool) or value is None:
            raise ValueError("confidence must be numeric")
        return value

    @field_validator("confidence")
    @classmethod
    def clamp_confidence(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("confidence must be finite")
        return min(100.0, max(0.0, value))

    @field_validator("red_flags", mode="before")
    @classmethod
    def coerce_red_flags(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(flag) for flag in value if str(flag).strip()]
        return value


class ModelAnalysis(BaseModel):
    """Validated analysis attributed to one provider."""

    provider: str = Field(..., description="Provider that produced the analysis")
    verdict: Verdict
    confidence: float = Field(..., ge=0, le=100)
    reasoning: str = ""
    red_flags: List[str] = Field(default_factory=list)

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @classmethod
    def from_payload(cls, provider: str, payload: AnalysisPayload) -> "ModelAnalysis":
        """Attribute an extracted payload to its provider."""
        return cls(
            provider=provider,
            verdict=payload.verdict,
            confidence=payload.confidence,
            reasoning=payload.reasoning,
            red_flags=list(payload.red_flags),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response contract."""
        return {
            "provider": self.provider,
            "verdict": self.verdict.value,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "redFlags": list(self.red_flags),
        }


@dataclass
class FactCheckResult:
    """Consensus verdict over all providers that answered."""

    overall_verdict: Verdict
    confidence_score: int
    models: List[ModelAnalysis]
    consensus: str
    recommendations: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate the result."""
        if not self.models:
            raise ValueError("A fact check result needs at least one model analysis")

        if not 0 <= self.confidence_score <= 100:
            raise ValueError("Confidence score must be between 0 and 100")

    def to_dict(self) -> Dict[str, Any]:
        """Convert FactCheckResult to dictionary format for API responses."""
        return {
            "overallVerdict": self.overall_verdict.value,
            "confidenceScore": self.confidence_score,
            "models": [model.to_dict() for model in self.models],
            "consensus": self.consensus,
            "recommendations": list(self.recommendations),
        }
