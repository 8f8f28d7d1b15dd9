"""
Shared helpers for sanitizing error messages before they are logged or reported.
"""
from __future__ import annotations

import os
import re
from typing import Any

_API_KEY_RE = re.compile(r"(project_id|api[_-]?key|token)=([^\s&]+)", re.IGNORECASE)


def _mask_secrets(value: str) -> str:
    """Mask credential-looking query parameters embedded in transport errors."""
    return _API_KEY_RE.sub(r"\1=[redacted]", value)


def sanitize_error_message(exc: Any, fallback: str) -> str:
    """
    Build a safe one-line error message.

    Args:
        exc: Exception or raw value to sanitize.
        fallback: Fallback message to show when nothing meaningful remains.

    Returns:
        A single-line string suitable for logs and summaries.
    """
    if not fallback:
        fallback = "An error occurred"

    if exc is None:
        return fallback

    try:
        raw = str(exc)
    except Exception:
        raw = ""

    if not raw:
        return f"{fallback}: {type(exc).__name__}" if isinstance(exc, BaseException) else fallback

    sanitized = _mask_secrets(raw.replace(os.getcwd(), "[cwd]"))
    sanitized = " ".join(sanitized.splitlines()).strip()

    if sanitized:
        return f"{fallback}: {sanitized[:200]}"
    return fallback
