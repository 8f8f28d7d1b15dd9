from pathlib import Path

from scidx_backend.features.index import persistence
from scidx_backend.features.index.persistence import commit, write_text_atomic
from scidx_backend.features.index.records import parse_project_record
from tests.helpers import HASH_A, make_project, make_script, read_json


def _record(path: Path):
    doc = make_project("Minswap", [make_script(HASH_A)], keep=True)
    record = parse_project_record(path, doc).unwrap()
    record.scripts[0].type = "PLUTUS"
    record.scripts[0].plutus_version = 2
    record.dirty = True
    return record


def test_write_text_atomic_replaces_file(tmp_path) -> None:
    target = tmp_path / "nested" / "out.json"
    assert write_text_atomic(target, "one\n").ok
    assert write_text_atomic(target, "two\n").ok
    assert target.read_text(encoding="utf-8") == "two\n"
    assert [p.name for p in target.parent.iterdir()] == ["out.json"]


def test_write_text_atomic_reports_failure(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    res = write_text_atomic(blocker / "out.json", "x")
    assert not res.ok
    assert res.code == "WRITE_FAILED"


def test_dry_run_writes_nothing(tmp_path) -> None:
    record_path = tmp_path / "minswap.json"
    index_file = tmp_path / "scripts" / "script-index.json"
    res = commit(index_file=index_file, index_document={"scripts": {}}, staged=[_record(record_path)], dry_run=True)
    assert res.ok
    assert res.data.dry_run
    assert not record_path.exists()
    assert not index_file.exists()


def test_commit_writes_records_before_index(tmp_path, monkeypatch) -> None:
    order: list[str] = []
    real_write = persistence.write_text_atomic

    def spy(path, payload):
        order.append(path.name)
        return real_write(path, payload)

    monkeypatch.setattr(persistence, "write_text_atomic", spy)
    record_path = tmp_path / "minswap.json"
    index_file = tmp_path / "script-index.json"

    res = commit(index_file=index_file, index_document={"scripts": {}}, staged=[_record(record_path)], dry_run=False)
    assert res.ok
    assert order == ["minswap.json", "script-index.json"]
    assert res.data.index_written
    assert res.data.records_written == [str(record_path)]

    rewritten = read_json(record_path)
    assert rewritten["keep"] is True
    assert rewritten["scripts"][0]["type"] == "PLUTUS"
    assert rewritten["scripts"][0]["plutusVersion"] == 2


def test_index_write_failure_is_an_error(tmp_path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("file", encoding="utf-8")
    res = commit(index_file=blocker / "script-index.json", index_document={}, staged=[], dry_run=False)
    assert not res.ok
    assert res.code == "WRITE_FAILED"
    assert res.meta["report"].index_written is False


def test_failed_replace_removes_temp_file(tmp_path) -> None:
    target = tmp_path / "script-index.json"
    target.mkdir()
    res = write_text_atomic(target, "payload\n")
    assert not res.ok
    assert res.code == "WRITE_FAILED"
    assert [p.name for p in tmp_path.iterdir()] == ["script-index.json"]
