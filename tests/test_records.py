"""Tests for the file-per-record JSON store."""
import datetime
import json

import pytest

from sitestore.config import StoreConfig
from sitestore.errors import Conflict, NotFound, ValidationError
from sitestore.records import RecordStore, sort_newest_first
from sitestore.timeutil import isoz


@pytest.fixture
def store(tmp_path) -> RecordStore:
    record_store = RecordStore(StoreConfig(directory=str(tmp_path / "records")))
    record_store.ensure_directory()
    return record_store


def _label(payload):
    return payload.get("businessName")


def test_append_then_read_round_trips(store, now):
    payload = {"businessName": "Acme Inc", "email": "a@acme.test", "submittedAt": isoz(now)}

    record = store.append(payload, _label, now=now)

    assert record["id"] == "2026-10-18T12-00-00-000Z_acme_inc"
    assert record["fileName"] == record["id"] + ".json"
    assert store.read(record["id"]) == record


def test_append_never_overwrites_existing_key(store, now):
    first = store.append({"businessName": "Acme"}, _label, now=now)
    second = store.append({"businessName": "Acme"}, _label, now=now)

    assert first["id"] != second["id"]
    assert second["id"] == first["id"] + "-1"
    assert len(store.list()) == 2


def test_create_conflicts_on_existing_key(store):
    store.create("my-post", {"slug": "my-post"})

    with pytest.raises(Conflict):
        store.create("my-post", {"slug": "my-post"})


def test_list_sorted_newest_first_by_consumer(store, now):
    times = [now - datetime.timedelta(minutes=m) for m in (30, 20, 10)]
    for i, t in enumerate(times):
        store.append({"businessName": f"b{i}", "submittedAt": isoz(t)}, _label, now=t)

    ordered = sort_newest_first(store.list(), "submittedAt")

    assert [r["businessName"] for r in ordered] == ["b2", "b1", "b0"]


def test_list_skips_corrupt_and_foreign_files(store, now, tmp_path):
    store.append({"businessName": "Good"}, _label, now=now)
    (tmp_path / "records" / "broken.json").write_text("{not json", encoding="utf-8")
    (tmp_path / "records" / "notes.txt").write_text("ignore me", encoding="utf-8")
    (tmp_path / "records" / "nested.json").mkdir()

    records = store.list()

    assert [r["businessName"] for r in records] == ["Good"]


def test_read_of_corrupt_record_is_not_found(store, tmp_path):
    (tmp_path / "records" / "broken.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(NotFound):
        store.read("broken")


def test_read_and_delete_missing_record(store):
    with pytest.raises(NotFound):
        store.read("missing")
    with pytest.raises(NotFound):
        store.delete("missing")


def test_delete_removes_file(store, now):
    record = store.append({"businessName": "Gone"}, _label, now=now)

    store.delete(record["id"])

    assert store.list() == []


def test_invalid_key_is_rejected(store):
    with pytest.raises(ValidationError):
        store.read("../../etc/passwd")


def test_save_overwrites_pretty_printed_json(store, tmp_path):
    store.create("post", {"title": "one"})

    store.save("post", {"title": "two"})

    text = (tmp_path / "records" / "post.json").read_text(encoding="utf-8")
    assert json.loads(text) == {"title": "two"}
    assert "\n  " in text


def test_sort_puts_records_without_timestamp_last():
    records = [{"n": 1}, {"n": 2, "createdAt": "2026-01-01T00:00:00.000Z"}]

    assert [r["n"] for r in sort_newest_first(records)] == [2, 1]
