"""
Runtime settings for the freelancmusic service.

Settings are read from environment variables once per process and cached.
Enumerated values that cannot be recognised are replaced by their default
so that a typo in the environment never prevents the service from booting.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from .models import THEMES, Theme


logger = logging.getLogger(__name__)

# Per-user directory so preferences survive reinstalls of the package.
DEFAULT_DATA_DIR = Path.home() / ".freelancmusic"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

BioBackend = Literal["gemini", "local"]
BIO_BACKENDS = ("gemini", "local")


class Settings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    data_dir: Path = DEFAULT_DATA_DIR
    api_key: Optional[str] = None
    bio_backend: BioBackend = "gemini"
    gemini_model: str = "gemini-2.5-flash"
    local_model: str = "google/flan-t5-base"
    ambient_theme: Theme = "light"
    log_level: str = "INFO"

    @property
    def preferences_file(self) -> Path:
        return self.data_dir / "preferences.json"


def _env(name: str) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _choice(name: str, allowed, default: str) -> str:
    raw = _env(name)
    if raw is None:
        return default
    value = {a.lower(): a for a in allowed}.get(raw.lower())
    if value is None:
        logger.warning("Ignoring %s=%r; expected one of %s", name, raw, ", ".join(allowed))
        return default
    return value


def load_settings() -> Settings:
    """Build settings from the current environment."""
    data_dir = _env("FREELANCMUSIC_DATA_DIR")
    return Settings(
        data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
        api_key=_env("GEMINI_API_KEY") or _env("API_KEY"),
        bio_backend=_choice("FREELANCMUSIC_BIO_BACKEND", BIO_BACKENDS, "gemini"),
        gemini_model=_env("FREELANCMUSIC_GEMINI_MODEL") or "gemini-2.5-flash",
        local_model=_env("FREELANCMUSIC_LOCAL_MODEL") or "google/flan-t5-base",
        ambient_theme=_choice("FREELANCMUSIC_COLOR_SCHEME", THEMES, "light"),
        log_level=_choice("FREELANCMUSIC_LOG_LEVEL", LOG_LEVELS, "INFO"),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
