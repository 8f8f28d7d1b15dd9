"""
Lookup capability contract and the classification parser shared by adapters.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from ...shared import NATIVE_PLUTUS_VERSION, ErrorCode, Result, ScriptType

_NATIVE_SENTINELS = frozenset({"timelock", "native", "multisig"})
_PLUTUS_RE = re.compile(r"^plutus[\s_-]*v?(\d+)$", re.IGNORECASE)


@dataclass(frozen=True)
class ScriptClassification:
    type: ScriptType
    plutus_version: int


def parse_classification(raw: object) -> ScriptClassification | None:
    """
    Map a raw classification string from a lookup source to a typed value.

    "timelock" (and the other native sentinels) becomes NATIVE with version 0,
    "plutusV2" style strings become PLUTUS with the parsed version. Anything
    else is unparseable and yields None.
    """
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if value.lower() in _NATIVE_SENTINELS:
        return ScriptClassification(ScriptType.NATIVE, NATIVE_PLUTUS_VERSION)
    match = _PLUTUS_RE.match(value)
    if match:
        return ScriptClassification(ScriptType.PLUTUS, int(match.group(1)))
    return None


@runtime_checkable
class ScriptLookup(Protocol):
    """A source that classifies a script by its normalized hash."""

    @property
    def available(self) -> bool: ...

    async def lookup(self, script_hash: str) -> Result[ScriptClassification]: ...

    async def aclose(self) -> None: ...


class AbsentLookup:
    """The "no lookup source configured" capability."""

    available = False

    async def lookup(self, script_hash: str) -> Result[ScriptClassification]:
        return Result.Err(ErrorCode.LOOKUP_UNAVAILABLE, "No lookup source configured", hash=script_hash)

    async def aclose(self) -> None:
        return None

    async def __aenter__(self) -> "AbsentLookup":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False
