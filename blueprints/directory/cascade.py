# blueprints/directory/cascade.py
"""
Referential-integrity rules for deletes.

    class    -> its sections
    section  -> its schedule entries
    teacher  -> its schedule entries and task completions
    task     -> its task completions

The whole affected set is computed from one snapshot before anything is
written, then every touched collection is committed together.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set

from record_store import (
    RecordStore, TEACHERS, CLASSES, SECTIONS, SCHEDULE, TASKS, TASK_COMPLETIONS,
)

log = logging.getLogger(__name__)

_COLLECTION_FOR = {
    "teachers": TEACHERS,
    "classes": CLASSES,
    "sections": SECTIONS,
    "entries": SCHEDULE,
    "tasks": TASKS,
    "completions": TASK_COMPLETIONS,
}


@dataclass
class DeletePlan:
    teachers: Set[str] = field(default_factory=set)
    classes: Set[str] = field(default_factory=set)
    sections: Set[str] = field(default_factory=set)
    entries: Set[str] = field(default_factory=set)
    tasks: Set[str] = field(default_factory=set)
    completions: Set[str] = field(default_factory=set)

    def counts(self) -> Dict[str, int]:
        return {name: len(getattr(self, name)) for name in _COLLECTION_FOR}

    def is_empty(self) -> bool:
        return not any(getattr(self, name) for name in _COLLECTION_FOR)


def _ids(records: List[dict]) -> Set[str]:
    return {r.get("id") for r in records}


def plan_deletion(snapshot: Dict[str, List[dict]], *,
                  teacher_ids: Iterable[str] = (),
                  class_ids: Iterable[str] = (),
                  section_ids: Iterable[str] = (),
                  task_ids: Iterable[str] = ()) -> DeletePlan:
    """Expand the requested roots into everything that references them.

    Ids that do not exist in the snapshot are dropped from the plan.
    """
    plan = DeletePlan()
    plan.teachers = set(teacher_ids) & _ids(snapshot.get(TEACHERS, []))
    plan.classes = set(class_ids) & _ids(snapshot.get(CLASSES, []))
    plan.tasks = set(task_ids) & _ids(snapshot.get(TASKS, []))

    sections = snapshot.get(SECTIONS, [])
    plan.sections = set(section_ids) & _ids(sections)
    plan.sections |= {s["id"] for s in sections if s.get("classId") in plan.classes}

    plan.entries = {
        e["id"] for e in snapshot.get(SCHEDULE, [])
        if e.get("sectionId") in plan.sections or e.get("teacherId") in plan.teachers
    }
    plan.completions = {
        c["id"] for c in snapshot.get(TASK_COMPLETIONS, [])
        if c.get("teacherId") in plan.teachers or c.get("taskId") in plan.tasks
    }
    return plan


def apply_plan(store: RecordStore, snapshot: Dict[str, List[dict]], plan: DeletePlan) -> bool:
    changes: Dict[str, List[dict]] = {}
    for name, key in _COLLECTION_FOR.items():
        doomed = getattr(plan, name)
        if not doomed:
            continue
        changes[key] = [r for r in snapshot.get(key, []) if r.get("id") not in doomed]
    if not changes:
        return True
    ok = store.commit(changes)
    if ok:
        log.info("cascade delete committed", extra={"deleted": plan.counts()})
    else:
        log.warning("cascade delete was not persisted", extra={"deleted": plan.counts()})
    return ok


def cascade_delete(store: RecordStore, **roots: Iterable[str]) -> DeletePlan:
    snapshot = store.snapshot(*_COLLECTION_FOR.values(), for_update=True)
    plan = plan_deletion(snapshot, **roots)
    apply_plan(store, snapshot, plan)
    return plan
