"""
External script classification sources.

`build_lookup` always returns a capability object: an `HttpScriptLookup` when a
lookup URL is configured, otherwise `AbsentLookup`. Callers check
`lookup.available` instead of testing for None.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ...shared import get_logger
from .base import AbsentLookup, ScriptClassification, ScriptLookup, parse_classification
from .http import HttpScriptLookup

if TYPE_CHECKING:
    from ...config import BuilderSettings

logger = get_logger(__name__)


def build_lookup(settings: "BuilderSettings") -> ScriptLookup:
    if not settings.lookup_configured:
        logger.info("No lookup source configured; missing script types stay unresolved")
        return AbsentLookup()
    logger.info("Lookup source configured (concurrency=%s)", settings.lookup_concurrency)
    return HttpScriptLookup(
        str(settings.lookup_url),
        api_key=settings.lookup_api_key,
        timeout=settings.lookup_timeout,
        concurrency=settings.lookup_concurrency,
    )


__all__ = [
    "AbsentLookup",
    "HttpScriptLookup",
    "ScriptClassification",
    "ScriptLookup",
    "build_lookup",
    "parse_classification",
]
