"""
Script hash canonicalization.

Index keys are the lower-case 56 hex character payment credential. A 112
character value (payment + staking credential) is truncated to its first 56
characters; the staking half is dropped for good.
"""
from __future__ import annotations

from typing import Any

from ...shared import FULL_CREDENTIAL_LENGTH, SCRIPT_HASH_LENGTH, ErrorCode, Result


def normalize_hash(raw: str) -> str:
    key = str(raw or "").strip().lower()
    if len(key) == FULL_CREDENTIAL_LENGTH:
        return key[:SCRIPT_HASH_LENGTH]
    return key


def is_canonical_length(key: str) -> bool:
    return len(key) == SCRIPT_HASH_LENGTH


def check_hash_length(key: str, *, strict: bool) -> Result[str]:
    """
    Permissive mode accepts any length and flags non-canonical ones in `meta`;
    strict mode rejects them.
    """
    if is_canonical_length(key):
        return Result.Ok(key)
    if strict:
        return Result.Err(
            ErrorCode.HASH_LENGTH,
            f"Script hash has {len(key)} characters, expected {SCRIPT_HASH_LENGTH}",
            hash=key,
        )
    return Result.Ok(key, non_canonical=True, length=len(key))


def normalize_index_keys(scripts: dict[str, Any]) -> tuple[dict[str, Any], int]:
    """
    Re-key legacy entries so every key is in normalized form.

    A legacy key moves to its normalized key unless that key already holds an
    entry, in which case the canonical entry is kept. Returns the new mapping
    (original order preserved) and the number of legacy keys folded away.
    """
    out: dict[str, Any] = {}
    rekeyed = 0
    for key, entry in scripts.items():
        canonical = normalize_hash(key)
        if canonical == key:
            out[key] = entry
            continue
        rekeyed += 1
        if canonical in scripts or canonical in out:
            continue
        out[canonical] = entry
    return out, rekeyed
