from __future__ import annotations
import pytest

from blueprints.directory.cascade import plan_deletion
from blueprints.directory.services import RosterService
from blueprints.schedule.services import TimetableStore
from blueprints.tasks.services import TaskTracker
from record_store import (
    MemoryRecordStore, RecordStore, TEACHERS, CLASSES, SECTIONS, SCHEDULE,
    TASK_COMPLETIONS,
)

class CountingStore(MemoryRecordStore):
    def __init__(self):
        super().__init__()
        self.commits = 0

    def commit(self, changes):
        self.commits += 1
        return super().commit(changes)

@pytest.fixture()
def store():
    return CountingStore()

@pytest.fixture()
def school(store):
    roster = RosterService(store)
    ahmad = roster.create_teacher("  أحمد ")
    sara = roster.create_teacher("سارة")
    six = roster.create_class("الصف السادس")
    six_a = roster.create_section(six.id, "أ")
    six_b = roster.create_section(six.id, "ب", name="السادس ب")
    tt = TimetableStore(store)
    tt.assign(six_a.id, 1, 0, ahmad.id)
    tt.assign(six_a.id, 2, 0, sara.id)
    tt.assign(six_b.id, 1, 0, sara.id)
    TaskTracker(store).create_task("دفتر التحضير")
    return {"roster": roster, "tt": tt, "ahmad": ahmad, "sara": sara,
            "six": six, "six_a": six_a, "six_b": six_b}

def test_names_are_trimmed_and_section_name_defaults(school):
    assert school["ahmad"].name == "أحمد"
    assert school["six_a"].name == "الصف السادس أ"
    assert school["six_b"].name == "السادس ب"

def test_create_section_for_missing_class(store):
    assert RosterService(store).create_section("nope", "أ") is None
    assert store.read(SECTIONS) == []

def test_sections_with_class_names(school, store):
    rows = {s.id: s for s in school["roster"].sections_with_class()}
    assert rows[school["six_a"].id].class_name == "الصف السادس"
    # orphaned section shows the placeholder
    store.write(CLASSES, [])
    rows = {s.id: s for s in school["roster"].sections_with_class()}
    assert rows[school["six_a"].id].to_dict()["className"] == "غير معروف"

def test_new_teacher_gets_open_completions(school, store):
    fatima = school["roster"].create_teacher("فاطمة")
    mine = [c for c in store.read(TASK_COMPLETIONS) if c["teacherId"] == fatima.id]
    assert len(mine) == 1 and mine[0]["completed"] is False

def test_update_missing_returns_none(school):
    roster = school["roster"]
    assert roster.update_teacher("missing", "x y") is None
    assert roster.update_class("missing", "x y") is None
    assert roster.update_section("missing", "أ") is None
    assert roster.update_teacher(school["ahmad"].id, "أحمد علي").name == "أحمد علي"

def test_delete_teacher_cascades_in_one_commit(school, store):
    before = store.commits
    assert school["roster"].delete_teacher(school["sara"].id)
    assert store.commits == before + 1
    assert all(e["teacherId"] != school["sara"].id for e in store.read(SCHEDULE))
    assert all(c["teacherId"] != school["sara"].id for c in store.read(TASK_COMPLETIONS))
    assert len(store.read(SCHEDULE)) == 1
    assert not school["roster"].delete_teacher(school["sara"].id)

def test_delete_section_removes_its_entries(school, store):
    assert school["roster"].delete_section(school["six_a"].id)
    assert [e["sectionId"] for e in store.read(SCHEDULE)] == [school["six_b"].id]

def test_delete_class_cascades_to_sections_and_entries(school, store):
    before = store.commits
    assert school["roster"].delete_class(school["six"].id)
    assert store.commits == before + 1
    assert store.read(SECTIONS) == []
    assert store.read(SCHEDULE) == []
    # teachers untouched
    assert len(store.read(TEACHERS)) == 2

def test_plan_ignores_unknown_ids(school, store):
    snap = store.snapshot(TEACHERS, CLASSES, SECTIONS, SCHEDULE, TASK_COMPLETIONS)
    plan = plan_deletion(snap, teacher_ids=["ghost"], class_ids=["ghost"])
    assert plan.is_empty()

def test_timetable_helpers_are_idempotent(school, store):
    tt = school["tt"]
    tt.remove_all_for_teacher("ghost")
    tt.remove_all_for_section("ghost")
    assert len(store.read(SCHEDULE)) == 3
    tt.remove_all_for_teacher(school["sara"].id)
    tt.remove_all_for_teacher(school["sara"].id)
    assert len(store.read(SCHEDULE)) == 1
    tt.remove_all_for_section(school["six_a"].id)
    assert store.read(SCHEDULE) == []

def test_store_is_injected(school):
    assert isinstance(school["roster"].store, RecordStore)
