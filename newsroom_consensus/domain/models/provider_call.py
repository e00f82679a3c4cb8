"""Domain models for dispatching work to AI providers."""

from enum import Enum
from typing import Any, Optional, Type

from pydantic import BaseModel, Field, model_validator


class FailureKind(str, Enum):
    """Why a provider call did not yield a usable payload."""

    TIMEOUT = "timeout"  # Call exceeded its own deadline
    TRANSPORT = "transport"  # Network, auth or HTTP error
    MALFORMED = "malformed"  # Response could not be extracted or validated
    UNAVAILABLE = "unavailable"  # No adapter registered under that name


class ProviderCall(BaseModel):
    """A single unit of work for one provider."""

    provider: str = Field(..., description="Registry name of the provider")
    prompt: str = Field(..., description="Rendered user prompt")
    system_prompt: Optional[str] = Field(None, description="Instructions sent on the system channel")
    timeout: float = Field(default=30.0, gt=0, description="Per-call deadline in seconds")
    facet: Optional[str] = Field(None, description="Tag identifying what this call contributes")
    response_model: Optional[Type[BaseModel]] = Field(
        None, description="Schema the response payload is validated against"
    )

    class Config:
        """Pydantic model configuration."""
        frozen = True  # Immutable model
        arbitrary_types_allowed = True


class ProviderOutcome(BaseModel):
    """Settled result of executing a ProviderCall.

    Exactly one of ``payload`` and ``failure`` is set.
    """

    index: int = Field(..., description="Position of the originating call")
    provider: str = Field(..., description="Provider that handled the call")
    facet: Optional[str] = Field(None, description="Facet tag copied from the call")
    payload: Optional[str] = Field(None, description="Raw response text")
    data: Optional[Any] = Field(None, description="Validated response model, when one was requested")
    failure: Optional[FailureKind] = Field(None, description="Failure classification")
    error: Optional[str] = Field(None, description="Human-readable failure detail")
    elapsed_ms: float = Field(default=0.0, description="Wall time spent on the call")

    class Config:
        """Pydantic model configuration."""
        frozen = True

    @model_validator(mode="after")
    def check_payload_xor_failure(self) -> "ProviderOutcome":
        if (self.payload is None) == (self.failure is None):
            raise ValueError("Exactly one of payload or failure must be set")
        return self

    @property
    def succeeded(self) -> bool:
        """Whether the call produced a payload."""
        return self.failure is None

    @classmethod
    def success(
        cls,
        call: ProviderCall,
        index: int,
        payload: str,
        data: Any = None,
        elapsed_ms: float = 0.0,
    ) -> "ProviderOutcome":
        """Build a successful outcome for a call."""
        return cls(
            index=index,
            provider=call.provider,
            facet=call.facet,
            payload=payload,
            data=data,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def failed(
        cls,
        call: ProviderCall,
        index: int,
        failure: FailureKind,
        error: str,
        elapsed_ms: float = 0.0,
    ) -> "ProviderOutcome":
        """Build a failed outcome for a call."""
        return cls(
            index=index,
            provider=call.provider,
            facet=call.facet,
            failure=failure,
            error=error,
            elapsed_ms=elapsed_ms,
        )
