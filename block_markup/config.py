"""Runtime settings with environment fallbacks."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_MAX_DEPTH = 12
# Hard ceiling on nesting, whatever max_depth is configured to.
MAX_NESTING_DEPTH = 64
DEFAULT_LOCALE = "en_US"


@dataclass(slots=True)
class EngineSettings:
    """Conversion defaults; unset fields are read from the environment.

    ``BLOCK_MARKUP_MAX_DEPTH`` bounds nested block recursion,
    ``BLOCK_MARKUP_LOCALE`` picks number/date conventions and
    ``BLOCK_MARKUP_TIME_ZONE`` converts aware timestamps before display.
    """

    max_depth: int | None = None
    locale: str | None = None
    time_zone: str | None = None

    def __post_init__(self) -> None:
        if self.max_depth is None:
            self.max_depth = _env_int("BLOCK_MARKUP_MAX_DEPTH", DEFAULT_MAX_DEPTH)
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1.")
        if self.max_depth > MAX_NESTING_DEPTH:
            raise ValueError(f"max_depth must be at most {MAX_NESTING_DEPTH}.")
        if self.locale is None:
            self.locale = os.getenv("BLOCK_MARKUP_LOCALE") or DEFAULT_LOCALE
        if self.time_zone is None:
            self.time_zone = os.getenv("BLOCK_MARKUP_TIME_ZONE") or None


def load_settings(dotenv_path: str | Path | None = None, **overrides: object) -> EngineSettings:
    """Load ``.env`` (without overriding the process environment) then build settings."""
    load_dotenv(dotenv_path=dotenv_path, override=False)
    return EngineSettings(**overrides)  # type: ignore[arg-type]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from exc


__all__ = ["DEFAULT_LOCALE", "DEFAULT_MAX_DEPTH", "MAX_NESTING_DEPTH", "EngineSettings", "load_settings"]
