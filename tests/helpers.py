"""Shared builders and fakes for the index tests."""
from __future__ import annotations

import json
from pathlib import Path

from scidx_backend.adapters.lookup import parse_classification
from scidx_backend.shared import Result

HASH_A = "aa" * 28
HASH_B = "bb" * 28
HASH_C = "cc" * 28
STAKE_SUFFIX = "ef" * 28


def write_json(path: Path, payload) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path


def read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def make_project(label: str, scripts: list[dict], **extra) -> dict:
    doc = {
        "label": label,
        "category": "DEFI",
        "subCategory": "AMM_DEX",
        "link": {"website": f"https://{label.lower()}.io"},
    }
    doc.update(extra)
    doc["scripts"] = scripts
    return doc


def make_script(script_hash: str, name: str = "Pool", purpose: str = "SPEND", **extra) -> dict:
    doc = {"name": name, "scriptHash": script_hash, "purpose": purpose}
    doc.update(extra)
    return doc


class FakeLookup:
    """Lookup capability answering from a dict; records every queried hash."""

    def __init__(self, answers=None, *, available=True, raises=None):
        self.answers = dict(answers or {})
        self.available = available
        self.raises = raises
        self.calls: list[str] = []
        self.closed = False

    async def lookup(self, script_hash):
        self.calls.append(script_hash)
        if self.raises is not None:
            raise self.raises
        raw = self.answers.get(script_hash)
        if raw is None:
            return Result.Err("NOT_FOUND", "Script not found")
        parsed = parse_classification(raw)
        if parsed is None:
            return Result.Err("PARSE_ERROR", f"Unrecognized script type: {raw!r}")
        return Result.Ok(parsed)

    async def aclose(self):
        self.closed = True


class DroppingLookup(FakeLookup):
    """Answers normally, then reports itself unavailable once `drop_on` is queried."""

    def __init__(self, answers=None, *, drop_on: str):
        super().__init__(answers)
        self.drop_on = drop_on

    async def lookup(self, script_hash):
        if script_hash == self.drop_on:
            self.calls.append(script_hash)
            self.available = False
            return Result.Err("LOOKUP_UNAVAILABLE", "Lookup source unreachable")
        return await super().lookup(script_hash)
