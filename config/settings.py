from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


load_dotenv()


DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-5-20250929"
MAX_TOKENS = 1024
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    def __init__(self) -> None:
        self.app_env: str = os.getenv("APP_ENV", "development")
        self.anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY") or None
        self.claude_model: str = os.getenv("CLAUDE_MODEL", DEFAULT_CLAUDE_MODEL)
        self.max_tokens: int = MAX_TOKENS
        self.host: str = os.getenv("HOST", "127.0.0.1")
        self.port: str = os.getenv("PORT", "3000")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.cors_origins: List[str] = _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
        )
        self.client_build_dir: str = os.getenv("CLIENT_BUILD_DIR", os.path.join("dist", "client"))


class SettingsCheck(BaseModel):
    ok: bool
    errors: List[str] = Field(default_factory=list)


def validate_settings(settings: Settings) -> SettingsCheck:
    """Check the settings the server needs before it binds a port."""
    errors: List[str] = []
    if not settings.anthropic_api_key:
        errors.append("ANTHROPIC_API_KEY is not set in environment variables")

    try:
        port = int(settings.port)
    except ValueError:
        errors.append(f"PORT must be an integer, got {settings.port!r}")
    else:
        if not 0 < port < 65536:
            errors.append(f"PORT must be between 1 and 65535, got {port}")

    if settings.log_level not in LOG_LEVELS:
        errors.append(f"LOG_LEVEL is not a valid logging level: {settings.log_level!r}")

    return SettingsCheck(ok=not errors, errors=errors)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
