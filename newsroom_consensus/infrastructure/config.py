"""Configuration for the consensus engine, read from the environment."""

import logging
import os
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

EXPECTED_FACT_CHECK_PROVIDERS = 3


def _split(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class EngineConfig(BaseModel):
    """Settings for providers, fan-out and trend analysis."""

    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-5"
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    provider_timeout: float = Field(default=30.0, gt=0, description="Per-call deadline in seconds")
    max_retries: int = Field(default=0, ge=0, description="Retries after a transport failure")
    retry_delay: float = Field(default=1.0, ge=0, description="Delay between retries in seconds")

    fact_check_providers: List[str] = Field(default_factory=lambda: ["openai", "anthropic", "gemini"])
    topics_provider: str = "openai"
    keywords_provider: str = "anthropic"
    trend_cache_ttl: float = Field(default=0, ge=0, description="Trend result cache TTL, 0 disables it")

    log_level: str = "INFO"

    @field_validator("fact_check_providers")
    @classmethod
    def require_providers(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("At least one fact-check provider must be configured")
        if len(value) != EXPECTED_FACT_CHECK_PROVIDERS:
            logger.warning(
                f"⚠️ {len(value)} fact-check providers configured, majority voting expects "
                f"{EXPECTED_FACT_CHECK_PROVIDERS}: {', '.join(value)}"
            )
        return value

    @classmethod
    def from_env(cls, load_dotenv_file: bool = True) -> "EngineConfig":
        """Create configuration from environment variables.

        Args:
            load_dotenv_file: Whether to load a ``.env`` file first
        """
        if load_dotenv_file:
            load_dotenv()

        config = cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            openai_model=os.getenv("OPENAI_MODEL", "gpt-4o"),
            anthropic_api_key=os.getenv("ANTHROPIC_API_KEY", ""),
            anthropic_model=os.getenv("ANTHROPIC_MODEL", "claude-sonnet-4-5"),
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.0-flash"),
            provider_timeout=float(os.getenv("CONSENSUS_PROVIDER_TIMEOUT", "30")),
            max_retries=int(os.getenv("CONSENSUS_MAX_RETRIES", "0")),
            retry_delay=float(os.getenv("CONSENSUS_RETRY_DELAY", "1.0")),
            fact_check_providers=_split(
                os.getenv("CONSENSUS_FACT_CHECK_PROVIDERS", "openai,anthropic,gemini")
            ),
            topics_provider=os.getenv("CONSENSUS_TOPICS_PROVIDER", "openai"),
            keywords_provider=os.getenv("CONSENSUS_KEYWORDS_PROVIDER", "anthropic"),
            trend_cache_ttl=float(os.getenv("CONSENSUS_TREND_CACHE_TTL", "0")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )

        for name, key in (
            ("OPENAI_API_KEY", config.openai_api_key),
            ("ANTHROPIC_API_KEY", config.anthropic_api_key),
            ("GEMINI_API_KEY", config.gemini_api_key),
        ):
            if not key:
                logger.warning(f"⚠️ {name} not found in environment variables")

        return config

    @property
    def required_providers(self) -> List[str]:
        """Every provider some flow dispatches to, without duplicates."""
        names = list(self.fact_check_providers) + [self.topics_provider, self.keywords_provider]
        return list(dict.fromkeys(names))
