import os
import logging
from typing import List

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./advisor.db")

    # LLM
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    OPENAI_MODEL_FAST: str = os.getenv("OPENAI_MODEL_FAST", "gpt-4o-mini")
    OPENAI_MODEL_ADVISOR: str = os.getenv("OPENAI_MODEL_ADVISOR", "gpt-4o")
    LLM_TEMPERATURE: float = float(os.getenv("LLM_TEMPERATURE", "0.3"))
    LLM_MAX_TOKENS: int = int(os.getenv("LLM_MAX_TOKENS", "1500"))

    # Per-agent budget for a single LLM round trip
    AGENT_TIMEOUT_SECONDS: float = float(os.getenv("AGENT_TIMEOUT_SECONDS", "45"))

    # Server
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    ALLOWED_ORIGINS: List[str] = _split_csv(os.getenv("ALLOWED_ORIGINS", "*"))

    @classmethod
    def validate(cls):
        """Log warnings for settings that disable features when missing."""
        if not cls.OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY not set. Recommendation agents will return no results.")
        if "DATABASE_URL" not in os.environ:
            logger.warning(f"DATABASE_URL not set. Falling back to {cls.DATABASE_URL}")


settings = Settings()
