"""
Archive Configuration

Settings shared by the build scripts, the search engine and the HTTP service.
All values are read from environment variables at import time.
"""

import os
from enum import Enum
from pathlib import Path


class Environment(str, Enum):
    """Deployment environment, from ENVIRONMENT"""

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


def _get_environment() -> Environment:
    """Read ENVIRONMENT; there is no default."""
    env_value = os.getenv("ENVIRONMENT")
    if env_value is None:
        raise RuntimeError(
            "ENVIRONMENT is required (production, development or test)"
        )
    try:
        return Environment(env_value.lower())
    except ValueError:
        raise RuntimeError(
            f"Invalid ENVIRONMENT {env_value!r} "
            "(expected production, development or test)"
        )


class Settings:
    """Archive configuration (corpus location, index output, search tuning)"""

    # Paths
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent.parent
    DATA_DIR: Path = BASE_DIR / "data"

    # Corpus
    # Directory tree laid out as {MEETING_LOG_PATH}/{year}/{name}.md
    MEETING_LOG_PATH: str = os.getenv(
        "MEETING_LOG_PATH", str(BASE_DIR / "dev-meeting-log")
    )

    # Build output
    OUTPUT_DIR: str = os.getenv("OUTPUT_DIR", str(DATA_DIR / "site"))
    SEARCH_INDEX_FILENAME: str = os.getenv("SEARCH_INDEX_FILENAME", "search-index.json")
    RECORDS_FILENAME: str = os.getenv("RECORDS_FILENAME", "meetings.json")

    # Extraction limits
    SUMMARY_MAX_CHARS: int = int(os.getenv("SUMMARY_MAX_CHARS", "200"))
    INDEX_CONTENT_MAX_CHARS: int = int(os.getenv("INDEX_CONTENT_MAX_CHARS", "1501"))

    # Search runtime
    SEARCH_BASE_URL: str = os.getenv("SEARCH_BASE_URL", "")
    SEARCH_DEBOUNCE_MS: int = int(os.getenv("SEARCH_DEBOUNCE_MS", "200"))
    SEARCH_MAX_RESULTS: int = int(os.getenv("SEARCH_MAX_RESULTS", "20"))
    MAX_QUERY_LEN: int = int(os.getenv("MAX_QUERY_LEN", "200"))
    SEARCH_FETCH_TIMEOUT_SEC: float = float(
        os.getenv("SEARCH_FETCH_TIMEOUT_SEC", "10")
    )

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "False").lower() == "true"

    # Deployment
    ENVIRONMENT: Environment = _get_environment()

    @property
    def SEARCH_INDEX_PATH(self) -> Path:
        return Path(self.OUTPUT_DIR) / self.SEARCH_INDEX_FILENAME


settings = Settings()
