"""Error taxonomy for the consensus engine."""


class ConsensusEngineError(Exception):
    """Base class for all consensus engine errors."""


class ProviderError(ConsensusEngineError):
    """Raised by an adapter when its backend cannot produce a response."""

    def __init__(self, provider: str, message: str):
        """Initialize the error.

        Args:
            provider: Name of the failing provider
            message: Description of the failure
        """
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message


class ExtractionError(ConsensusEngineError):
    """Raised when structured output cannot be located or fails validation."""

    EXCERPT_LENGTH = 200

    def __init__(self, reason: str, raw_text: str = ""):
        """Initialize the error.

        Args:
            reason: Why extraction failed
            raw_text: The provider text that was being parsed
        """
        super().__init__(reason)
        self.reason = reason
        self.excerpt = raw_text[: self.EXCERPT_LENGTH]


class AllProvidersFailedError(ConsensusEngineError):
    """No provider produced a valid analysis."""

    def __init__(self, message: str = "All AI providers failed to analyse the claim"):
        super().__init__(message)


class TrendAnalysisError(ConsensusEngineError):
    """A required trend specialist did not produce a usable result."""
