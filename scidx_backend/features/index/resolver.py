"""
Metadata resolver - fills missing script classification.

Resolution order, first match wins:
    1. the record already carries both `type` and `plutusVersion`;
    2. the in-memory index has a fully classified entry for the same hash;
    3. the external lookup source, when one is available.
Anything else leaves the fields absent. Filling a field marks the owning
project record dirty so the builder can stage a rewrite; the resolver itself
never touches files.
"""
from __future__ import annotations

import asyncio
from collections import Counter
from typing import Any, Iterable, Literal, Mapping

from ...adapters.lookup import ScriptClassification, ScriptLookup
from ...shared import ErrorCode, ScriptType, get_logger, sanitize_error_message
from ...utils import optional_int
from .records import ProjectRecord, ScriptRecord

logger = get_logger(__name__)

ResolveOutcome = Literal["present", "index", "lookup", "unresolved", "absent"]


def _entry_classification(entry: Mapping[str, Any] | None) -> ScriptClassification | None:
    if not entry:
        return None
    raw_type = entry.get("type")
    version = optional_int(entry.get("plutusVersion"))
    if raw_type is None or version is None:
        return None
    try:
        return ScriptClassification(ScriptType(str(raw_type).upper()), version)
    except ValueError:
        return None


def _fill(script: ScriptRecord, classification: ScriptClassification) -> bool:
    """Fill absent fields only. Returns True when something was written."""
    filled = False
    if script.type is None:
        script.type = classification.type.value
        filled = True
    if script.plutus_version is None:
        script.plutus_version = classification.plutus_version
        filled = True
    return filled


class MetadataResolver:
    def __init__(self, lookup: ScriptLookup):
        self._lookup = lookup
        self._cache: dict[str, ScriptClassification | None] = {}
        self.lookups_performed = 0
        self.outcomes: Counter = Counter()

    @property
    def lookup_available(self) -> bool:
        return bool(self._lookup.available)

    async def _lookup_one(self, key: str) -> ScriptClassification | None:
        self.lookups_performed += 1
        try:
            result = await self._lookup.lookup(key)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.warning("Lookup raised for %s...: %s", key[:16], sanitize_error_message(exc, "lookup error"))
            return None
        if result.ok:
            return result.data
        if result.code != ErrorCode.NOT_FOUND.value:
            logger.debug("Lookup unresolved for %s... [%s] %s", key[:16], result.code, result.error)
        return None

    async def prefetch(self, keys: Iterable[str]) -> int:
        """
        Warm the per-run cache concurrently. The lookup adapter bounds the
        number of requests in flight; results are keyed by hash, so arrival
        order never reaches the merge.
        """
        if not self.lookup_available:
            return 0
        pending = [key for key in dict.fromkeys(keys) if key not in self._cache]
        if not pending:
            return 0
        results = await asyncio.gather(*(self._lookup_one(key) for key in pending))
        for key, classification in zip(pending, results):
            self._cache[key] = classification
        return len(pending)

    async def classify(self, key: str) -> ScriptClassification | None:
        if key not in self._cache:
            if not self.lookup_available:
                return None
            self._cache[key] = await self._lookup_one(key)
        return self._cache[key]

    async def resolve(
        self,
        project: ProjectRecord,
        script: ScriptRecord,
        key: str,
        scripts: Mapping[str, Any],
    ) -> ResolveOutcome:
        outcome = await self._resolve(project, script, key, scripts)
        self.outcomes[outcome] += 1
        return outcome

    async def _resolve(
        self,
        project: ProjectRecord,
        script: ScriptRecord,
        key: str,
        scripts: Mapping[str, Any],
    ) -> ResolveOutcome:
        if script.classified:
            return "present"

        known = _entry_classification(scripts.get(key))
        if known is not None:
            if _fill(script, known):
                project.dirty = True
            return "index"

        # Answers fetched before the source went away still apply.
        if key not in self._cache and not self.lookup_available:
            return "absent"

        classification = await self.classify(key)
        if classification is None:
            return "unresolved"
        if _fill(script, classification):
            project.dirty = True
        return "lookup"
