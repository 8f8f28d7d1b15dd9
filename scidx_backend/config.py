"""
Configuration for the script index builder.

All values come from environment variables; nothing here is required. A missing
lookup URL simply means the external classification source is not available.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

from .utils import env_bool

logger = logging.getLogger(__name__)


def _env_raw(*names: str, default: str | None = None) -> str | None:
    for name in names:
        if not name:
            continue
        val = os.getenv(name)
        if val is not None and str(val).strip() != "":
            return str(val).strip()
    return default


def _env_int(default: int, *names: str, min_value: int | None = None, max_value: int | None = None) -> int:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid integer for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_float(default: float, *names: str, min_value: float | None = None, max_value: float | None = None) -> float:
    raw = _env_raw(*names)
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid float for %s=%r, using default=%s", names[0] if names else "<unknown>", raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning("Value too small for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, min_value)
        value = min_value
    if max_value is not None and value > max_value:
        logger.warning("Value too large for %s=%s, clamped to %s", names[0] if names else "<unknown>", value, max_value)
        value = max_value
    return value


def _env_bool(default: bool, *names: str) -> bool:
    for name in names:
        if name and name in os.environ:
            return env_bool(name, default)
    return default


DEFAULT_REGISTRY_DIR = "registry"
INDEX_FILE_NAME = "script-index.json"


@dataclass(frozen=True)
class BuilderSettings:
    """Snapshot of the builder configuration for a single run."""

    projects_dir: Path
    index_file: Path
    lookup_url: str | None = None
    lookup_api_key: str | None = None
    lookup_timeout: float = 15.0
    lookup_concurrency: int = 4
    strict_hash_length: bool = False

    @property
    def lookup_configured(self) -> bool:
        return bool(self.lookup_url)

    def with_overrides(self, **changes) -> "BuilderSettings":
        return replace(self, **changes)

    @classmethod
    def from_env(cls) -> "BuilderSettings":
        registry = Path(_env_raw("SCIDX_REGISTRY_DIR", default=DEFAULT_REGISTRY_DIR) or DEFAULT_REGISTRY_DIR).expanduser()
        projects_raw = _env_raw("SCIDX_PROJECTS_DIR")
        index_raw = _env_raw("SCIDX_INDEX_FILE")
        return cls(
            projects_dir=Path(projects_raw).expanduser() if projects_raw else registry / "projects",
            index_file=Path(index_raw).expanduser() if index_raw else registry / "scripts" / INDEX_FILE_NAME,
            lookup_url=_env_raw("SCIDX_LOOKUP_URL"),
            lookup_api_key=_env_raw("SCIDX_LOOKUP_API_KEY"),
            lookup_timeout=_env_float(15.0, "SCIDX_LOOKUP_TIMEOUT", min_value=1.0, max_value=300.0),
            lookup_concurrency=_env_int(4, "SCIDX_LOOKUP_CONCURRENCY", min_value=1, max_value=32),
            strict_hash_length=_env_bool(False, "SCIDX_STRICT_HASH_LENGTH"),
        )
