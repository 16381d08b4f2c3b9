# blueprints/substitution/services.py
"""
Substitution finder.

A teacher is available at period+day when no schedule entry at that period+day
names them. Availability is a plain free/busy test; results keep roster order.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Optional, Set

from blueprints.schedule.services import TimetableStore
from models import Teacher
from record_store import RecordStore, RecordNotFound, SCHEDULE, TEACHERS


@dataclass
class AvailableTeacher:
    id: str
    name: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SubstitutionResult:
    entry_id: str
    absent_teacher: AvailableTeacher
    available: List[AvailableTeacher]

    def to_dict(self) -> dict:
        return {
            "entryId": self.entry_id,
            "absentTeacher": self.absent_teacher.to_dict(),
            "available": [t.to_dict() for t in self.available],
        }


class NoTeacherAssigned(RecordNotFound):
    def __init__(self, section_id: str, period: int, day_of_week: int):
        super().__init__(SCHEDULE, f"{section_id}/{period}/{day_of_week}")
        self.reason = "لم يتم تعيين معلم لهذه الحصة في هذا اليوم"


def busy_teacher_ids(store: RecordStore, period: int, day_of_week: int) -> Set[str]:
    return {e.teacher_id for e in TimetableStore(store).list_by_period(period, day_of_week)}


def find_available_teachers(store: RecordStore, period: int, day_of_week: int,
                            exclude_teacher_id: Optional[str] = None) -> List[AvailableTeacher]:
    busy = busy_teacher_ids(store, period, day_of_week)
    out: List[AvailableTeacher] = []
    for rec in store.read(TEACHERS):
        t = Teacher.from_record(rec)
        # the absent teacher is never offered, even when technically free
        if exclude_teacher_id and t.id == exclude_teacher_id:
            continue
        if t.id in busy:
            continue
        out.append(AvailableTeacher(id=t.id, name=t.name))
    return out


def find_substitutes(store: RecordStore, section_id: str, period: int, day_of_week: int) -> SubstitutionResult:
    """Mark the teacher of a slot absent and list who could stand in."""
    entry = TimetableStore(store).find_slot(section_id, period, day_of_week)
    if entry is None or not entry.teacher_id:
        raise NoTeacherAssigned(section_id, period, day_of_week)
    teacher = next((Teacher.from_record(r) for r in store.read(TEACHERS)
                    if r.get("id") == entry.teacher_id), None)
    if teacher is None:
        raise NoTeacherAssigned(section_id, period, day_of_week)
    return SubstitutionResult(
        entry_id=entry.id,
        absent_teacher=AvailableTeacher(id=teacher.id, name=teacher.name),
        available=find_available_teachers(store, period, day_of_week, exclude_teacher_id=teacher.id),
    )
