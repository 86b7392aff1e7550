"""Client configuration loaded from environment variables."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NOTES_",
    }

    # Firebase project
    firebase_api_key: str = ""
    firebase_project_id: str = ""
    auth_base_url: str = "https://identitytoolkit.googleapis.com/v1"
    token_url: str = "https://securetoken.googleapis.com/v1/token"

    # Firestore
    notes_collection: str = "notes"

    # Local session cache
    session_cache_path: Path = Path.home() / ".firebase_notes" / "session.json"

    request_timeout: float = 10.0  # seconds
    ui_refresh_seconds: float = 2.0
    log_level: str = "INFO"

    @property
    def configured(self) -> bool:
        """Whether the Firebase project credentials are present."""
        return bool(self.firebase_api_key and self.firebase_project_id)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once with the project format."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
