"""Configuration management for Recipe Generator.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # OpenAI API Key: checked per request, a missing key fails generation only
        self.OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
        # Chat completion model. Default: gpt-4o-mini (fast, cost-effective)
        self.OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        # Base URL of the chat completion API (override for proxies or compatible servers)
        self.OPENAI_BASE_URL: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1").rstrip("/")
        # Max Tokens: ceiling on the completion length. 1500 fits a full recipe
        self.MAX_TOKENS: int = int(os.getenv("MAX_TOKENS", "1500"))
        # Temperature: 0.8 favours variety over determinism
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.8"))
        # Upstream request timeout in seconds
        self.REQUEST_TIMEOUT_SECONDS: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
        # Catalog store: Supabase project URL. When unset the built-in catalog is used
        self.SUPABASE_URL: Optional[str] = os.getenv("SUPABASE_URL") or None
        # Supabase anon key: required if SUPABASE_URL is set
        self.SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
        # Server Port
        self.PORT: int = int(os.getenv("PORT", "7777"))

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If values are out of range or a required companion key is missing.
        """
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(
                f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}"
            )
        if self.MAX_TOKENS < 1:
            raise ValueError(
                f"MAX_TOKENS must be at least 1, got: {self.MAX_TOKENS}"
            )
        if self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.SUPABASE_URL and not self.SUPABASE_ANON_KEY:
            raise ValueError("SUPABASE_ANON_KEY environment variable is required when SUPABASE_URL is set")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
