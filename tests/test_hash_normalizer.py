from scidx_backend.features.index.hash_normalizer import (
    check_hash_length,
    is_canonical_length,
    normalize_hash,
    normalize_index_keys,
)
from tests.helpers import HASH_A, HASH_B, STAKE_SUFFIX


def test_normalize_lowercases_56_char_hash() -> None:
    raw = "AABBCC" + "0" * 50
    assert normalize_hash(raw) == raw.lower()


def test_normalize_truncates_full_credential_to_payment_part() -> None:
    full = (HASH_A + STAKE_SUFFIX).upper()
    key = normalize_hash(full)
    assert key == HASH_A
    assert len(key) == 56


def test_normalize_is_idempotent_for_112_char_hashes() -> None:
    full = "AbCd" * 28
    assert len(full) == 112
    once = normalize_hash(full)
    assert normalize_hash(once) == once == full[:56].lower()


def test_other_lengths_pass_through_lowercased() -> None:
    assert normalize_hash("  DEADBEEF  ") == "deadbeef"
    assert normalize_hash("ab" * 29) == "ab" * 29
    assert normalize_hash("") == ""


def test_check_hash_length_permissive_flags_non_canonical() -> None:
    res = check_hash_length("abc", strict=False)
    assert res.ok
    assert res.meta.get("non_canonical") is True
    assert res.meta.get("length") == 3

    canonical = check_hash_length(HASH_A, strict=False)
    assert canonical.ok and not canonical.meta


def test_check_hash_length_strict_rejects() -> None:
    res = check_hash_length("abc", strict=True)
    assert not res.ok
    assert res.code == "HASH_LENGTH"
    assert check_hash_length(HASH_A, strict=True).ok
    assert is_canonical_length(HASH_A)


def test_normalize_index_keys_moves_legacy_keys() -> None:
    legacy = HASH_B + STAKE_SUFFIX
    scripts = {
        HASH_A: {"projectId": "a"},
        legacy: {"projectId": "b"},
    }
    out, rekeyed = normalize_index_keys(scripts)
    assert rekeyed == 1
    assert list(out) == [HASH_A, HASH_B]
    assert out[HASH_B] == {"projectId": "b"}
    assert legacy not in out


def test_normalize_index_keys_keeps_existing_canonical_entry() -> None:
    legacy = HASH_A + STAKE_SUFFIX
    scripts = {
        legacy: {"projectId": "legacy"},
        HASH_A: {"projectId": "canonical"},
    }
    out, rekeyed = normalize_index_keys(scripts)
    assert rekeyed == 1
    assert out == {HASH_A: {"projectId": "canonical"}}
