from scidx_backend.features.index.diff_tracker import DiffTracker, build_script_entry, classify_entry
from scidx_backend.features.index.records import ScriptRecord
from tests.helpers import HASH_A


def _script(**kw) -> ScriptRecord:
    base = {"name": "Pool", "script_hash": HASH_A, "purpose": "SPEND"}
    base.update(kw)
    return ScriptRecord(**base)


def test_build_script_entry_omits_absent_classification() -> None:
    entry = build_script_entry("minswap", _script())
    assert entry == {"projectId": "minswap", "name": "Pool", "purpose": "SPEND"}


def test_build_script_entry_keeps_zero_version() -> None:
    entry = build_script_entry("minswap", _script(type="NATIVE", plutus_version=0))
    assert entry["type"] == "NATIVE"
    assert entry["plutusVersion"] == 0


def test_classify_added_updated_unchanged() -> None:
    candidate = {"projectId": "p", "name": "Pool", "purpose": "SPEND", "type": "PLUTUS", "plutusVersion": 2}
    assert classify_entry(candidate, None) == "added"
    assert classify_entry(candidate, dict(candidate)) == "unchanged"
    assert classify_entry(candidate, {**candidate, "name": "Old"}) == "updated"
    assert classify_entry(candidate, {**candidate, "plutusVersion": 1}) == "updated"


def test_classify_absent_version_differs_from_present() -> None:
    prior = {"projectId": "p", "name": "Pool", "purpose": "SPEND", "type": "PLUTUS"}
    candidate = {**prior, "plutusVersion": 2}
    assert classify_entry(candidate, prior) == "updated"
    assert classify_entry(prior, {**prior, "plutusVersion": None}) == "unchanged"


def test_tracker_tallies_and_sorts_additions() -> None:
    tracker = DiffTracker()
    for key, outcome, project in [
        ("k1", "added", "b"),
        ("k2", "added", "a"),
        ("k3", "added", "b"),
        ("k4", "updated", "a"),
        ("k5", "unchanged", "c"),
    ]:
        tracker.record(key, outcome, project)
    assert (tracker.added, tracker.updated, tracker.unchanged) == (3, 1, 1)
    assert tracker.additions_by_project() == [("b", 2), ("a", 1)]
    assert tracker.changed


def test_tracker_later_claim_replaces_earlier_outcome() -> None:
    tracker = DiffTracker()
    tracker.record("k1", "updated", "alpha")
    tracker.record("k1", "unchanged", "beta")
    assert (tracker.added, tracker.updated, tracker.unchanged) == (0, 0, 1)
    assert not tracker.changed


def test_tracker_unchanged_only_is_not_a_change() -> None:
    tracker = DiffTracker()
    tracker.record("k1", "unchanged", "a")
    assert not tracker.changed
    assert tracker.additions_by_project() == []
