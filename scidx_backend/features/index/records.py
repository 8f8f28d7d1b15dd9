"""
Project record files: discovery, parsing, project ids, and rewrite documents.

Record files are validated against the registry schema before they get here,
so parsing only trusts the fields the index needs and keeps the raw document
for back-propagation rewrites.
"""
from __future__ import annotations

import copy
import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...shared import ErrorCode, Result, ScriptType, get_logger
from ...utils import optional_int

logger = get_logger(__name__)

# Legacy registry display names mapped to the preferred index labels
PROJECT_LABEL_MAP: dict[str, str] = {
    "CSWAP DEX": "CSWAP",
    "Genius Yield": "GeniusYield",
    "Splash Protocol": "Splash",
}

_CAMEL_BOUNDARY_RE = re.compile(r"([a-z])([A-Z])")
_SEPARATOR_RE = re.compile(r"[\s_]+")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9-]", re.IGNORECASE)


def to_kebab_case(value: str) -> str:
    """`"SundaeSwap Finance"` -> `"sundae-swap-finance"`."""
    text = _CAMEL_BOUNDARY_RE.sub(r"\1-\2", str(value or ""))
    text = _SEPARATOR_RE.sub("-", text)
    text = _SLUG_INVALID_RE.sub("", text)
    return text.lower()


def project_id_for(label: str) -> str:
    return to_kebab_case(label)


def normalize_project_label(label: str) -> str:
    return PROJECT_LABEL_MAP.get(label, label)


def _clean_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def _parse_script_type(value: Any) -> str | None:
    raw = _clean_str(value)
    if raw is None:
        return None
    try:
        return ScriptType(raw.upper()).value
    except ValueError:
        logger.debug("Ignoring unknown script type %r", raw)
        return None


@dataclass
class ScriptRecord:
    name: str
    script_hash: str
    purpose: str
    type: str | None = None
    plutus_version: int | None = None
    position: int = 0

    @property
    def classified(self) -> bool:
        return self.type is not None and self.plutus_version is not None


@dataclass
class ProjectRecord:
    path: Path
    label: str
    category: str | None = None
    sub_category: str | None = None
    website: str | None = None
    scripts: list[ScriptRecord] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict)
    dirty: bool = False

    @property
    def project_id(self) -> str:
        return project_id_for(self.label)

    def index_entry(self) -> dict[str, Any]:
        """Project entry for the index; the whole entry is replaced on every run."""
        entry: dict[str, Any] = {
            "label": normalize_project_label(self.label),
            "category": self.category or "UNKNOWN",
        }
        if self.sub_category:
            entry["subCategory"] = self.sub_category
        if self.website:
            entry["link"] = self.website
        return entry

    def to_document(self) -> dict[str, Any]:
        """
        Full record document with resolved classification merged back into
        the original `scripts` array. Unknown fields are preserved.
        """
        doc = copy.deepcopy(self.raw)
        raw_scripts = doc.get("scripts")
        if not isinstance(raw_scripts, list):
            return doc
        for script in self.scripts:
            if script.position >= len(raw_scripts) or not isinstance(raw_scripts[script.position], dict):
                continue
            target = raw_scripts[script.position]
            if script.type is not None:
                target["type"] = script.type
            if script.plutus_version is not None:
                target["plutusVersion"] = script.plutus_version
        return doc


def _parse_scripts(raw_scripts: Any) -> list[ScriptRecord]:
    if not isinstance(raw_scripts, list):
        return []
    out: list[ScriptRecord] = []
    for position, item in enumerate(raw_scripts):
        if not isinstance(item, dict):
            continue
        out.append(
            ScriptRecord(
                name=_clean_str(item.get("name")) or "",
                script_hash=str(item.get("scriptHash") or "").strip(),
                purpose=_clean_str(item.get("purpose")) or "",
                type=_parse_script_type(item.get("type")),
                plutus_version=optional_int(item.get("plutusVersion")),
                position=position,
            )
        )
    return out


def parse_project_record(path: Path, data: Any) -> Result[ProjectRecord]:
    if not isinstance(data, dict):
        return Result.Err(ErrorCode.INVALID_INPUT, "Project record is not an object", path=str(path))
    label = _clean_str(data.get("label"))
    if label is None or not project_id_for(label):
        return Result.Err(ErrorCode.INVALID_INPUT, "Project record has no usable label", path=str(path))
    link = data.get("link")
    website = _clean_str(link.get("website")) if isinstance(link, dict) else None
    return Result.Ok(
        ProjectRecord(
            path=path,
            label=label,
            category=_clean_str(data.get("category")),
            sub_category=_clean_str(data.get("subCategory")),
            website=website,
            scripts=_parse_scripts(data.get("scripts")),
            raw=data,
        )
    )


def load_project_record(path: Path) -> Result[ProjectRecord]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        return Result.Err(ErrorCode.PARSE_ERROR, f"Failed to read project record: {exc}", path=str(path))
    return parse_project_record(path, data)


def iter_record_files(projects_dir: Path) -> list[Path]:
    """All `*.json` record files under `projects_dir`, in a stable order."""
    return sorted(p for p in projects_dir.rglob("*.json") if p.is_file())
