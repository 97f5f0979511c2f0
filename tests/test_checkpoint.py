import json

import pytest

from houzz_harvester.core.checkpoint import CheckpointError, CheckpointStore, derive_visited_index
from houzz_harvester.core.models import RECORD_FIELDS, BusinessRecord


def test_load_missing_file_returns_empty(tmp_path):
    store = CheckpointStore(tmp_path / "missing.json")
    assert store.load() == []


def test_append_persists_immediately(tmp_path):
    path = tmp_path / "nested" / "businesses.json"
    store = CheckpointStore(path)
    results = []

    store.append(results, BusinessRecord(url="https://example.com/pro/a~1", business_name="Ä Builders"))

    stored = json.loads(path.read_text(encoding="utf-8"))
    assert stored == [results[0].to_dict()]
    assert list(stored[0]) == list(RECORD_FIELDS)
    assert "Ä Builders" in path.read_text(encoding="utf-8")

    store.append(results, BusinessRecord(url="https://example.com/pro/b~2"))
    assert [row["url"] for row in json.loads(path.read_text(encoding="utf-8"))] == [
        "https://example.com/pro/a~1",
        "https://example.com/pro/b~2",
    ]


def test_load_round_trips_saved_records(tmp_path):
    store = CheckpointStore(tmp_path / "businesses.json")
    records = [BusinessRecord(url="u1", phone="1"), BusinessRecord(url="u2", followers="7")]
    store.save(records)

    assert store.load() == records


def test_load_fills_missing_and_null_fields(tmp_path):
    path = tmp_path / "businesses.json"
    path.write_text(json.dumps([{"url": "u1", "phone": None, "extra": "ignored"}]), encoding="utf-8")

    (record,) = CheckpointStore(path).load()

    assert record.url == "u1"
    assert record.phone == ""
    assert record.website == ""


def test_load_rejects_malformed_json(tmp_path):
    path = tmp_path / "businesses.json"
    path.write_text("[{", encoding="utf-8")

    with pytest.raises(CheckpointError):
        CheckpointStore(path).load()


def test_load_rejects_non_array(tmp_path):
    path = tmp_path / "businesses.json"
    path.write_text('{"url": "u1"}', encoding="utf-8")

    with pytest.raises(CheckpointError):
        CheckpointStore(path).load()


def test_load_rejects_non_utf8_file(tmp_path):
    path = tmp_path / "businesses.json"
    path.write_bytes(b'[{"url": "\xff\xfe"}]')

    with pytest.raises(CheckpointError):
        CheckpointStore(path).load()


def test_load_rejects_non_object_entries_and_leaves_file_intact(tmp_path):
    path = tmp_path / "businesses.json"
    original = json.dumps([{"url": "u1"}, "garbage", [1, 2]])
    path.write_text(original, encoding="utf-8")

    with pytest.raises(CheckpointError):
        CheckpointStore(path).load()

    assert path.read_text(encoding="utf-8") == original


@pytest.mark.parametrize("entry", [{"phone": "1"}, {"url": ""}, {"url": None}])
def test_load_rejects_entries_without_url(tmp_path, entry):
    path = tmp_path / "businesses.json"
    path.write_text(json.dumps([{"url": "u1"}, entry]), encoding="utf-8")

    with pytest.raises(CheckpointError):
        CheckpointStore(path).load()


def test_from_dict_requires_url():
    with pytest.raises(ValueError):
        BusinessRecord.from_dict({"business_name": "Acme"})


def test_derive_visited_index():
    records = [BusinessRecord(url="u1"), BusinessRecord(url="u2"), BusinessRecord(url="u1")]
    assert derive_visited_index(records) == {"u1", "u2"}
    assert derive_visited_index([]) == set()
