# blueprints/directory/services.py
from __future__ import annotations
import logging
from dataclasses import asdict, dataclass
from typing import List, Optional

from models import Teacher, SchoolClass, Section, TaskCompletion, UNKNOWN_LABEL
from record_store import (
    RecordStore, TEACHERS, CLASSES, SECTIONS, TASKS, TASK_COMPLETIONS,
    generate_id, now_ms,
)
from .cascade import cascade_delete

log = logging.getLogger(__name__)


@dataclass
class SectionWithClass:
    id: str
    class_id: str
    name: str
    section_letter: str
    class_name: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "classId": self.class_id,
            "name": self.name,
            "sectionLetter": self.section_letter,
            "className": self.class_name,
            "createdAt": self.created_at,
        }


def section_full_name(class_name: str, letter: str) -> str:
    return f"{class_name.strip()} {letter.strip()}"


def _replace(records: List[dict], updated: dict) -> List[dict]:
    return [updated if r.get("id") == updated["id"] else r for r in records]


class RosterService:
    """Teachers, classes and sections on top of a record store."""

    def __init__(self, store: RecordStore):
        self.store = store

    # ---------- teachers ----------
    def list_teachers(self) -> List[Teacher]:
        return [Teacher.from_record(r) for r in self.store.read(TEACHERS)]

    def get_teacher(self, teacher_id: str) -> Optional[Teacher]:
        return next((t for t in self.list_teachers() if t.id == teacher_id), None)

    def create_teacher(self, name: str) -> Teacher:
        snap = self.store.snapshot(TEACHERS, TASKS, TASK_COMPLETIONS, for_update=True)
        teacher = Teacher(id=generate_id(), name=name.strip(), created_at=now_ms())
        teachers = snap[TEACHERS] + [teacher.to_record()]
        # every existing task gets an open completion row for the newcomer
        completions = snap[TASK_COMPLETIONS] + [
            TaskCompletion(id=generate_id(), task_id=task["id"], teacher_id=teacher.id,
                           created_at=now_ms()).to_record()
            for task in snap[TASKS]
        ]
        if not self.store.commit({TEACHERS: teachers, TASK_COMPLETIONS: completions}):
            log.warning("teacher was not persisted", extra={"teacher_id": teacher.id})
        return teacher

    def update_teacher(self, teacher_id: str, name: str) -> Optional[Teacher]:
        records = self.store.read_for_update(TEACHERS)
        current = next((r for r in records if r.get("id") == teacher_id), None)
        if current is None:
            return None
        teacher = Teacher.from_record(current)
        teacher.name = name.strip()
        self.store.write(TEACHERS, _replace(records, {**current, **teacher.to_record()}))
        return teacher

    def delete_teacher(self, teacher_id: str) -> bool:
        plan = cascade_delete(self.store, teacher_ids=[teacher_id])
        return bool(plan.teachers)

    # ---------- classes ----------
    def list_classes(self) -> List[SchoolClass]:
        return [SchoolClass.from_record(r) for r in self.store.read(CLASSES)]

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.list_classes() if c.id == class_id), None)

    def create_class(self, name: str) -> SchoolClass:
        klass = SchoolClass(id=generate_id(), name=name.strip(), created_at=now_ms())
        self.store.write(CLASSES, self.store.read_for_update(CLASSES) + [klass.to_record()])
        return klass

    def update_class(self, class_id: str, name: str) -> Optional[SchoolClass]:
        records = self.store.read_for_update(CLASSES)
        current = next((r for r in records if r.get("id") == class_id), None)
        if current is None:
            return None
        klass = SchoolClass.from_record(current)
        klass.name = name.strip()
        self.store.write(CLASSES, _replace(records, {**current, **klass.to_record()}))
        return klass

    def delete_class(self, class_id: str) -> bool:
        plan = cascade_delete(self.store, class_ids=[class_id])
        return bool(plan.classes)

    # ---------- sections ----------
    def list_sections(self) -> List[Section]:
        return [Section.from_record(r) for r in self.store.read(SECTIONS)]

    def list_sections_for_class(self, class_id: str) -> List[Section]:
        return [s for s in self.list_sections() if s.class_id == class_id]

    def get_section(self, section_id: str) -> Optional[Section]:
        return next((s for s in self.list_sections() if s.id == section_id), None)

    def sections_with_class(self) -> List[SectionWithClass]:
        names = {c.id: c.name for c in self.list_classes()}
        out = []
        for s in self.list_sections():
            d = asdict(s)
            d["class_name"] = names.get(s.class_id, UNKNOWN_LABEL)
            out.append(SectionWithClass(**d))
        return out

    def create_section(self, class_id: str, section_letter: str, name: str | None = None) -> Optional[Section]:
        klass = self.get_class(class_id)
        if klass is None:
            return None
        letter = section_letter.strip()
        section = Section(
            id=generate_id(),
            class_id=class_id,
            name=(name or "").strip() or section_full_name(klass.name, letter),
            section_letter=letter,
            created_at=now_ms(),
        )
        self.store.write(SECTIONS, self.store.read_for_update(SECTIONS) + [section.to_record()])
        return section

    def update_section(self, section_id: str, section_letter: str, name: str | None = None) -> Optional[Section]:
        records = self.store.read_for_update(SECTIONS)
        current = next((r for r in records if r.get("id") == section_id), None)
        if current is None:
            return None
        section = Section.from_record(current)
        section.section_letter = section_letter.strip()
        if name and name.strip():
            section.name = name.strip()
        else:
            klass = self.get_class(section.class_id)
            section.name = section_full_name(klass.name if klass else UNKNOWN_LABEL, section.section_letter)
        self.store.write(SECTIONS, _replace(records, {**current, **section.to_record()}))
        return section

    def delete_section(self, section_id: str) -> bool:
        plan = cascade_delete(self.store, section_ids=[section_id])
        return bool(plan.sections)
