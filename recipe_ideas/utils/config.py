"""Configuration management for Recipe Ideas.

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
        # TheMealDB API root; the key is appended as a path segment
        self.MEALDB_BASE_URL: str = os.getenv("MEALDB_BASE_URL", "https://www.themealdb.com/api/json/v1").rstrip("/")
        # Public test key "1" works for the list, filter and lookup endpoints
        self.MEALDB_API_KEY: str = os.getenv("MEALDB_API_KEY", "1")
        # Total timeout per upstream request in seconds. Unset: aiohttp default
        timeout = os.getenv("REQUEST_TIMEOUT_SECONDS")
        self.REQUEST_TIMEOUT_SECONDS: Optional[float] = float(timeout) if timeout else None
        # Maximum number of intersected recipe ids looked up per run. Default: 20
        self.MAX_RESULTS: int = int(os.getenv("MAX_RESULTS", "20"))
        # Maximum number of autosuggest entries. Default: 10
        self.MAX_SUGGESTIONS: int = int(os.getenv("MAX_SUGGESTIONS", "10"))
        # Delay (ms) a query must stay unchanged before suggestions are recomputed
        self.SUGGEST_DEBOUNCE_MS: int = int(os.getenv("SUGGEST_DEBOUNCE_MS", "150"))
        # Initial cooking-time filter in minutes
        self.DEFAULT_MAX_MINUTES: int = int(os.getenv("DEFAULT_MAX_MINUTES", "45"))
        # Cooking-time filter values at or above this mean "more than an hour, no limit"
        self.NO_LIMIT_MINUTES: int = int(os.getenv("NO_LIMIT_MINUTES", "70"))
        # Output Format for query.py: "text" or "json". Default: "text"
        self.OUTPUT_FORMAT: str = os.getenv("OUTPUT_FORMAT", "text")

    @property
    def api_root(self) -> str:
        """Base URL including the API key segment."""
        return f"{self.MEALDB_BASE_URL}/{self.MEALDB_API_KEY}"

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a value is missing or out of range.
        """
        if not self.MEALDB_BASE_URL.startswith(("http://", "https://")):
            raise ValueError(f"MEALDB_BASE_URL must be an http(s) URL, got: {self.MEALDB_BASE_URL}")
        if not self.MEALDB_API_KEY:
            raise ValueError("MEALDB_API_KEY must not be empty")
        if self.REQUEST_TIMEOUT_SECONDS is not None and self.REQUEST_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"REQUEST_TIMEOUT_SECONDS must be positive when set, got: {self.REQUEST_TIMEOUT_SECONDS}"
            )
        if self.MAX_RESULTS < 1:
            raise ValueError(f"MAX_RESULTS must be at least 1, got: {self.MAX_RESULTS}")
        if self.MAX_SUGGESTIONS < 1:
            raise ValueError(f"MAX_SUGGESTIONS must be at least 1, got: {self.MAX_SUGGESTIONS}")
        if self.SUGGEST_DEBOUNCE_MS < 0:
            raise ValueError(f"SUGGEST_DEBOUNCE_MS must not be negative, got: {self.SUGGEST_DEBOUNCE_MS}")
        if self.NO_LIMIT_MINUTES < 1:
            raise ValueError(f"NO_LIMIT_MINUTES must be at least 1, got: {self.NO_LIMIT_MINUTES}")
        if self.DEFAULT_MAX_MINUTES < 0:
            raise ValueError(f"DEFAULT_MAX_MINUTES must not be negative, got: {self.DEFAULT_MAX_MINUTES}")
        if self.OUTPUT_FORMAT not in ("text", "json"):
            raise ValueError(f"OUTPUT_FORMAT must be 'text' or 'json', got: {self.OUTPUT_FORMAT}")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
