"""Configuration helpers.

Values are read from Streamlit secrets first, then from the process
environment. A local ``.env`` file next to the project is loaded into the
environment when present, which keeps local development easy.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PATH = Path(__file__).resolve().parent.parent / ".env"

REQUIRED_KEYS = ("STORE_URL", "STORE_KEY")


class ConfigError(RuntimeError):
    """A required setting is missing; the app cannot start."""


@dataclass(frozen=True)
class Settings:
    store_url: str
    store_key: str
    timezone: str = "UTC"
    session_days: int = 7
    log_level: str = "INFO"

    @property
    def is_sqlite(self) -> bool:
        return self.store_url.startswith("sqlite:")

    @property
    def sqlite_path(self) -> str:
        """``sqlite:///rel/path``, ``sqlite:////abs/path`` or ``sqlite::memory:``."""
        path = self.store_url[len("sqlite:"):]
        if path.startswith("///"):
            return path[3:]
        return path[2:] if path.startswith("//") else path


def _streamlit_secrets() -> Mapping[str, object]:
    try:
        import streamlit as st

        return dict(st.secrets)
    except Exception:
        # No secrets.toml (local runs, tests) - environment only
        logger.debug("Streamlit secrets unavailable, using environment")
        return {}


def _lookup(key: str, secrets: Mapping[str, object], environ: Mapping[str, str]) -> Optional[str]:
    value = secrets.get(key)
    if value is None:
        value = environ.get(key)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    secrets: Optional[Mapping[str, object]] = None,
) -> Settings:
    """Build settings, raising ConfigError when a required key is absent."""
    if environ is None:
        if ENV_PATH.exists():
            load_dotenv(ENV_PATH)
        environ = os.environ
    if secrets is None:
        secrets = _streamlit_secrets()

    missing = [key for key in REQUIRED_KEYS if not _lookup(key, secrets, environ)]
    if missing:
        raise ConfigError(f"Missing required settings: {', '.join(missing)}")

    session_days_raw = _lookup("SESSION_DAYS", secrets, environ) or "7"
    try:
        session_days = max(1, int(session_days_raw))
    except ValueError:
        raise ConfigError(f"SESSION_DAYS must be a whole number, got {session_days_raw!r}")

    return Settings(
        store_url=_lookup("STORE_URL", secrets, environ),
        store_key=_lookup("STORE_KEY", secrets, environ),
        timezone=_lookup("APP_TIMEZONE", secrets, environ) or "UTC",
        session_days=session_days,
        log_level=(_lookup("LOG_LEVEL", secrets, environ) or "INFO").upper(),
    )
