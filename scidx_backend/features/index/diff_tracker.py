"""
Diff classification of candidate script entries against the index as loaded.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Mapping

from ...shared import DiffOutcome
from .records import ScriptRecord

SCRIPT_ENTRY_FIELDS: tuple[str, ...] = ("projectId", "name", "purpose", "type", "plutusVersion")


def build_script_entry(project_id: str, script: ScriptRecord) -> dict[str, Any]:
    entry: dict[str, Any] = {
        "projectId": project_id,
        "name": script.name,
        "purpose": script.purpose,
    }
    if script.type is not None:
        entry["type"] = script.type
    if script.plutus_version is not None:
        entry["plutusVersion"] = script.plutus_version
    return entry


def classify_entry(candidate: Mapping[str, Any], prior: Mapping[str, Any] | None) -> DiffOutcome:
    # A missing key and an explicit null are both "absent".
    if prior is None:
        return "added"
    for name in SCRIPT_ENTRY_FIELDS:
        if candidate.get(name) != prior.get(name):
            return "updated"
    return "unchanged"


@dataclass
class DiffTracker:
    """
    Final diff outcome per index key. A later claim on the same key replaces
    the earlier one, so a hash shared by several records counts once.
    """

    outcomes: dict[str, tuple[DiffOutcome, str]] = field(default_factory=dict)

    def record(self, key: str, outcome: DiffOutcome, project_id: str) -> None:
        self.outcomes[key] = (outcome, project_id)

    def _count(self, outcome: DiffOutcome) -> int:
        return sum(1 for value, _ in self.outcomes.values() if value == outcome)

    @property
    def added(self) -> int:
        return self._count("added")

    @property
    def updated(self) -> int:
        return self._count("updated")

    @property
    def unchanged(self) -> int:
        return self._count("unchanged")

    @property
    def changed(self) -> bool:
        return any(value != "unchanged" for value, _ in self.outcomes.values())

    def additions_by_project(self) -> list[tuple[str, int]]:
        """Per-project additions, largest first, ties by project id."""
        counts = Counter(project_id for value, project_id in self.outcomes.values() if value == "added")
        return sorted(counts.items(), key=lambda item: (-item[1], item[0]))
