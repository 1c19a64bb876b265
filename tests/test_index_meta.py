import json

from docindex.indexing.index_meta import load_index_meta, save_index_meta
from docindex.models.schemas import IndexMetaEntry


def test_round_trip_uses_persisted_field_names(meta_path):
    meta = {
        "b.md": IndexMetaEntry(modified_at=1700000000123.456, chunk_count=2, indexed_at="2026-01-01T00:00:00+00:00"),
        "a.md": IndexMetaEntry(modified_at=1.5, chunk_count=1, indexed_at="2026-01-02T00:00:00+00:00"),
    }
    save_index_meta(meta_path, meta)

    raw = json.loads(meta_path.read_text(encoding="utf-8"))
    assert list(raw) == ["a.md", "b.md"]
    assert raw["b.md"] == {"mtime": 1700000000123.456, "chunks": 2, "indexed_at": "2026-01-01T00:00:00+00:00"}
    assert load_index_meta(meta_path) == meta


def test_missing_file_is_empty(tmp_path):
    assert load_index_meta(tmp_path / "absent.json") == {}


def test_corrupt_file_is_cold_start(meta_path):
    meta_path.parent.mkdir(parents=True)
    meta_path.write_text("[[[", encoding="utf-8")
    assert load_index_meta(meta_path) == {}


def test_invalid_entry_is_cold_start(meta_path):
    meta_path.parent.mkdir(parents=True)
    meta_path.write_text(json.dumps({"a.md": {"mtime": 1, "chunks": -3, "indexed_at": "x"}}), encoding="utf-8")
    assert load_index_meta(meta_path) == {}


def test_non_mapping_is_cold_start(meta_path):
    meta_path.parent.mkdir(parents=True)
    meta_path.write_text(json.dumps(["a.md"]), encoding="utf-8")
    assert load_index_meta(meta_path) == {}


def test_invalid_utf8_is_cold_start(meta_path):
    meta_path.parent.mkdir(parents=True)
    meta_path.write_bytes(b"\xff\xfe garbage")
    assert load_index_meta(meta_path) == {}


def test_embedding_model_persisted_when_known(meta_path):
    meta = {"a.md": IndexMetaEntry(modified_at=1.0, chunk_count=1, indexed_at="t", embedding_model="model-a")}
    save_index_meta(meta_path, meta)

    raw = json.loads(meta_path.read_text(encoding="utf-8"))
    assert raw["a.md"]["embedding_model"] == "model-a"
    assert load_index_meta(meta_path)["a.md"].embedding_model == "model-a"
