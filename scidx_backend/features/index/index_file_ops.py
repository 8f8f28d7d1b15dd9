"""
Index document load / serialize helpers.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...shared import ErrorCode, Result, get_logger

logger = get_logger(__name__)


@dataclass
class ScriptIndex:
    generated_at: str | None = None
    scripts: dict[str, dict[str, Any]] = field(default_factory=dict)
    projects: dict[str, dict[str, Any]] = field(default_factory=dict)

    @property
    def script_count(self) -> int:
        return len(self.scripts)

    @property
    def project_count(self) -> int:
        return len(self.projects)

    def to_document(self, generated_at: str | None = None) -> dict[str, Any]:
        return {
            "metadata": {
                "generatedAt": generated_at if generated_at is not None else self.generated_at,
                "scriptCount": self.script_count,
                "projectCount": self.project_count,
            },
            "scripts": self.scripts,
            "projects": self.projects,
        }


def serialize_document(doc: Any) -> str:
    return json.dumps(doc, ensure_ascii=False, indent=2) + "\n"


def serialize_index(index: ScriptIndex, generated_at: str | None = None) -> str:
    return serialize_document(index.to_document(generated_at))


def _mapping_of_dicts(value: Any) -> dict[str, dict[str, Any]]:
    if not isinstance(value, dict):
        return {}
    return {str(k): v for k, v in value.items() if isinstance(v, dict)}


def parse_index(text: str) -> Result[ScriptIndex]:
    try:
        data = json.loads(text) if text.strip() else None
    except json.JSONDecodeError as exc:
        return Result.Err(ErrorCode.PARSE_ERROR, f"Index is not valid JSON: {exc}")
    if not isinstance(data, dict):
        return Result.Err(ErrorCode.PARSE_ERROR, "Index document is not an object")
    metadata = data.get("metadata") if isinstance(data.get("metadata"), dict) else {}
    generated_at = metadata.get("generatedAt")
    return Result.Ok(
        ScriptIndex(
            generated_at=generated_at if isinstance(generated_at, str) else None,
            scripts=_mapping_of_dicts(data.get("scripts")),
            projects=_mapping_of_dicts(data.get("projects")),
        )
    )


@dataclass
class LoadedIndex:
    index: ScriptIndex
    original_text: str | None = None
    recovered: bool = False


def load_index(path: Path) -> LoadedIndex:
    """
    Read the existing index. A missing file starts empty; an unreadable or
    corrupt one is logged and also starts empty instead of aborting the run.
    """
    if not path.exists():
        logger.info("No existing index at %s, starting empty", path)
        return LoadedIndex(ScriptIndex())
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read index %s, starting empty: %s", path, exc)
        return LoadedIndex(ScriptIndex(), recovered=True)
    parsed = parse_index(text)
    if not parsed.ok or parsed.data is None:
        logger.warning("Corrupt index %s, starting empty: %s", path, parsed.error)
        return LoadedIndex(ScriptIndex(), original_text=text, recovered=True)
    return LoadedIndex(parsed.data, original_text=text)
