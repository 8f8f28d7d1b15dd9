from scidx_backend.features.index.index_file_ops import (
    ScriptIndex,
    load_index,
    parse_index,
    serialize_index,
)
from tests.helpers import HASH_A, write_json


def test_missing_index_starts_empty(tmp_path) -> None:
    loaded = load_index(tmp_path / "script-index.json")
    assert loaded.index.scripts == {}
    assert loaded.index.projects == {}
    assert loaded.original_text is None
    assert not loaded.recovered


def test_corrupt_index_is_recovered_as_empty(tmp_path) -> None:
    path = tmp_path / "script-index.json"
    path.write_text("[1, 2", encoding="utf-8")
    loaded = load_index(path)
    assert loaded.recovered
    assert loaded.index.scripts == {}


def test_non_object_index_is_a_parse_error() -> None:
    res = parse_index("[]")
    assert not res.ok
    assert res.code == "PARSE_ERROR"


def test_parse_ignores_malformed_sections() -> None:
    res = parse_index('{"metadata": "x", "scripts": {"a": 1, "b": {"name": "B"}}, "projects": []}')
    assert res.ok
    assert res.data.generated_at is None
    assert res.data.scripts == {"b": {"name": "B"}}
    assert res.data.projects == {}


def test_round_trip_keeps_text_identical(tmp_path) -> None:
    index = ScriptIndex(
        generated_at="2025-06-01T12:00:00.000Z",
        scripts={HASH_A: {"projectId": "minswap", "name": "Pool", "purpose": "SPEND"}},
        projects={"minswap": {"label": "Minswap", "category": "DEFI"}},
    )
    text = serialize_index(index)
    path = tmp_path / "script-index.json"
    path.write_text(text, encoding="utf-8")

    loaded = load_index(path)
    assert loaded.original_text == text
    assert serialize_index(loaded.index) == text


def test_serialized_document_layout() -> None:
    index = ScriptIndex(scripts={HASH_A: {"name": "Pool"}})
    text = serialize_index(index, generated_at="2025-01-01T00:00:00.000Z")
    assert text.endswith("}\n")
    assert text.startswith('{\n  "metadata": {\n    "generatedAt": "2025-01-01T00:00:00.000Z",')
    assert '"scriptCount": 1' in text
    assert '"projectCount": 0' in text


def test_counts_follow_contents(tmp_path) -> None:
    path = write_json(
        tmp_path / "idx.json",
        {"metadata": {"scriptCount": 99, "projectCount": 99}, "scripts": {HASH_A: {}}, "projects": {}},
    )
    index = load_index(path).index
    doc = index.to_document()
    assert doc["metadata"]["scriptCount"] == 1
    assert doc["metadata"]["projectCount"] == 0
