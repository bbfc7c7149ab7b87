"""
Configuration for the technical books API.

Settings are read directly from environment variables into a small
dataclass.  Every field has a default so the service starts without
any configuration; the data files land under ``./data`` unless
``DATA_DIR`` (or the individual ``*_FILE`` variables) say otherwise.
"""

import os
from dataclasses import dataclass, field
from typing import List


DEFAULT_BOOKS_BASE_URL = "https://www.googleapis.com/books/v1/volumes"


def _data_path(filename: str) -> str:
    return os.path.join(os.getenv("DATA_DIR", "data"), filename)


def _split_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Technical Books API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional log file; empty means console only.
    log_file: str = os.getenv("LOG_FILE", "")

    tsundoku_file: str = os.getenv("TSUNDOKU_FILE", _data_path("tsundoku.json"))
    favorites_file: str = os.getenv("FAVORITES_FILE", _data_path("favorites.json"))

    # Google Books.  The API key is optional; anonymous requests work
    # with a lower quota.
    books_api_key: str = os.getenv("BOOKS_API_KEY", "")
    books_base_url: str = os.getenv("BOOKS_BASE_URL", "") or DEFAULT_BOOKS_BASE_URL
    books_timeout: float = float(os.getenv("BOOKS_TIMEOUT", "5"))

    cors_origins: List[str] = field(
        default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "*"))
    )


# Environment variables must be set before this module is imported.
settings = Settings()
