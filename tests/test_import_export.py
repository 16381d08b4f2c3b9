from __future__ import annotations
import json
import pytest

from blueprints.import_export import services as svc
from record_store import (
    MemoryRecordStore, ALL_KEYS, TEACHERS, CLASSES, SCHEDULE, TASKS,
)

@pytest.fixture()
def store():
    return MemoryRecordStore({
        TEACHERS: [{"id": "t1", "name": "أحمد", "createdAt": 1}],
        CLASSES: [{"id": "c1", "name": "الصف السادس", "createdAt": 1}],
        SCHEDULE: [{"id": "e1", "sectionId": "s1", "period": 1, "dayOfWeek": 0,
                    "teacherId": "t1", "createdAt": 1}],
    })

def test_export_has_every_collection(store):
    doc = svc.export_data(store)
    assert set(doc) == {"teachers", "classes", "sections", "schedule",
                        "tasks", "taskCompletions", "exportedAt"}
    assert doc["teachers"][0]["name"] == "أحمد"
    assert doc["sections"] == []
    assert doc["exportedAt"].endswith("Z")
    # Arabic stays readable in the file
    assert "أحمد" in svc.export_json(store)

def test_export_then_import_into_empty_store(store):
    text = svc.export_json(store)
    fresh = MemoryRecordStore()
    assert svc.import_data(fresh, text)
    assert fresh.read(TEACHERS) == store.read(TEACHERS)
    assert fresh.read(SCHEDULE) == store.read(SCHEDULE)

def test_partial_import_leaves_other_collections(store):
    assert svc.import_data(store, {"teachers": [{"id": "t9", "name": "سارة", "createdAt": 2}]})
    assert [t["id"] for t in store.read(TEACHERS)] == ["t9"]
    assert store.read(CLASSES)[0]["id"] == "c1"
    assert store.read(SCHEDULE)[0]["id"] == "e1"

def test_empty_array_replaces_collection(store):
    assert svc.import_data(store, {"schedule": []})
    assert store.read(SCHEDULE) == []

@pytest.mark.parametrize("bad", ["not json", "[1, 2]", json.dumps({"teachers": "x"}), 42])
def test_bad_documents_are_rejected(store, bad):
    assert not svc.import_data(store, bad)
    assert store.read(TEACHERS)[0]["id"] == "t1"

def test_clear_all_data(store):
    store.write(TASKS, [{"id": "k1", "name": "x"}])
    svc.clear_all_data(store)
    assert all(store.read(k) == [] for k in ALL_KEYS)
