"""Runtime settings for the validation engine and service."""
from __future__ import annotations

import os
from pathlib import Path
from types import SimpleNamespace

ROOT = Path(__file__).resolve().parents[1]


def _comma_separated_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(value: str | None, default: bool) -> bool:
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


ENV = os.getenv("ENV", os.getenv("ENVIRONMENT", "development")).strip().lower()
ENVIRONMENT = os.getenv("ENVIRONMENT", ENV).strip().lower()
ALLOWED_CORS_ORIGINS = _comma_separated_list(os.getenv("ALLOWED_ORIGINS"))

SCHEMAS_DIR = Path(os.getenv("SCHEMAS_DIR", str(ROOT / "config" / "schemas"))).expanduser().resolve()
DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en").strip().lower() or "en"

# Strict: a property left null in a validator must exist in the properties repository.
PROPERTIES_REPO_STRICT = _flag(os.getenv("PROPERTIES_REPO_STRICT"), True)
MAX_VIOLATIONS = max(0, int(os.getenv("MAX_VIOLATIONS", "0")))

BODY_MAX_KB = int(os.getenv("BODY_MAX_KB", "512"))
MAX_BODY_BYTES = BODY_MAX_KB * 1024

RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "60"))
RATE_LIMIT_WINDOW_SECONDS = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

settings = SimpleNamespace(
    ENV=ENV,
    ENVIRONMENT=ENVIRONMENT,
    ALLOWED_ORIGINS=ALLOWED_CORS_ORIGINS,
    ALLOWED_CORS_ORIGINS=ALLOWED_CORS_ORIGINS,
    SCHEMAS_DIR=SCHEMAS_DIR,
    DEFAULT_LANGUAGE=DEFAULT_LANGUAGE,
    PROPERTIES_REPO_STRICT=PROPERTIES_REPO_STRICT,
    MAX_VIOLATIONS=MAX_VIOLATIONS,
    BODY_MAX_KB=BODY_MAX_KB,
    MAX_BODY_BYTES=MAX_BODY_BYTES,
    RATE_LIMIT_REQUESTS=RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS=RATE_LIMIT_WINDOW_SECONDS,
    LOG_LEVEL=LOG_LEVEL,
)

__all__ = [
    "ROOT",
    "ENV",
    "ENVIRONMENT",
    "ALLOWED_CORS_ORIGINS",
    "SCHEMAS_DIR",
    "DEFAULT_LANGUAGE",
    "PROPERTIES_REPO_STRICT",
    "MAX_VIOLATIONS",
    "BODY_MAX_KB",
    "MAX_BODY_BYTES",
    "RATE_LIMIT_REQUESTS",
    "RATE_LIMIT_WINDOW_SECONDS",
    "LOG_LEVEL",
    "settings",
]
