# blueprints/schedule/services.py
"""
Timetable store: the only way schedule entries are read or written.

A slot is the ``(section_id, period, day_of_week)`` triple and holds at most one
entry; ``assign`` upserts on it. Whether the teacher is already busy in another
section at the same period+day is not checked here, callers that care use
``teacher_conflicts``.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from models import (
    ScheduleEntry, Teacher, Section, SchoolClass, UNKNOWN_LABEL,
    PERIODS_PER_DAY, DAYS_PER_WEEK, period_label, day_label,
)
from record_store import (
    RecordStore, RecordNotFound, SCHEDULE, TEACHERS, SECTIONS, CLASSES,
    generate_id, now_ms,
)

log = logging.getLogger(__name__)


@dataclass
class EntryDetails:
    entry: ScheduleEntry
    teacher_name: str
    section_name: str
    class_name: str

    def to_dict(self) -> dict:
        d = self.entry.to_record()
        d.update({
            "teacherName": self.teacher_name,
            "sectionName": self.section_name,
            "className": self.class_name,
            "periodLabel": period_label(self.entry.period),
            "dayLabel": day_label(self.entry.day_of_week),
        })
        return d


class TimetableStore:
    def __init__(self, store: RecordStore):
        self.store = store

    def _load(self, for_update: bool = False) -> List[ScheduleEntry]:
        read = self.store.read_for_update if for_update else self.store.read
        return [ScheduleEntry.from_record(r) for r in read(SCHEDULE)]

    def _save(self, entries: List[ScheduleEntry]) -> bool:
        ok = self.store.write(SCHEDULE, [e.to_record() for e in entries])
        if not ok:
            log.warning("schedule was not persisted", extra={"entries": len(entries)})
        return ok

    # ---------- reads ----------
    def list_all(self) -> List[ScheduleEntry]:
        return self._load()

    def get(self, entry_id: str) -> Optional[ScheduleEntry]:
        return next((e for e in self._load() if e.id == entry_id), None)

    def list_by_section(self, section_id: str) -> List[ScheduleEntry]:
        return [e for e in self._load() if e.section_id == section_id]

    def list_by_period(self, period: int, day_of_week: int) -> List[ScheduleEntry]:
        """Every entry at period+day across all sections."""
        return [e for e in self._load() if e.period == period and e.day_of_week == day_of_week]

    def find_slot(self, section_id: str, period: int, day_of_week: int) -> Optional[ScheduleEntry]:
        key = (section_id, period, day_of_week)
        return next((e for e in self._load() if e.slot == key), None)

    def teacher_conflicts(self, teacher_id: str, period: int, day_of_week: int,
                          exclude_entry_id: Optional[str] = None) -> List[ScheduleEntry]:
        return [
            e for e in self.list_by_period(period, day_of_week)
            if e.teacher_id == teacher_id and e.id != exclude_entry_id
        ]

    # ---------- writes ----------
    def assign(self, section_id: str, period: int, day_of_week: int, teacher_id: str) -> ScheduleEntry:
        entries = self._load(for_update=True)
        key = (section_id, period, day_of_week)
        existing = next((e for e in entries if e.slot == key), None)
        if existing is not None:
            existing.teacher_id = teacher_id
            entry = existing
        else:
            entry = ScheduleEntry(
                id=generate_id(),
                section_id=section_id,
                period=period,
                day_of_week=day_of_week,
                teacher_id=teacher_id,
                created_at=now_ms(),
            )
            entries.append(entry)
        self._save(entries)
        return entry

    def set_teacher_for_entry(self, entry_id: str, teacher_id: str) -> ScheduleEntry:
        entries = self._load(for_update=True)
        entry = next((e for e in entries if e.id == entry_id), None)
        if entry is None:
            raise RecordNotFound(SCHEDULE, entry_id)
        entry.teacher_id = teacher_id
        self._save(entries)
        return entry

    def remove_slot(self, section_id: str, period: int, day_of_week: int) -> bool:
        key = (section_id, period, day_of_week)
        entries = self._load(for_update=True)
        kept = [e for e in entries if e.slot != key]
        if len(kept) == len(entries):
            return False
        self._save(kept)
        return True

    def remove_entry(self, entry_id: str) -> bool:
        entries = self._load(for_update=True)
        kept = [e for e in entries if e.id != entry_id]
        if len(kept) == len(entries):
            return False
        self._save(kept)
        return True

    def remove_all_for_section(self, section_id: str) -> None:
        entries = self._load(for_update=True)
        kept = [e for e in entries if e.section_id != section_id]
        if len(kept) != len(entries):
            self._save(kept)

    def remove_all_for_teacher(self, teacher_id: str) -> None:
        entries = self._load(for_update=True)
        kept = [e for e in entries if e.teacher_id != teacher_id]
        if len(kept) != len(entries):
            self._save(kept)

    # ---------- views ----------
    def with_details(self, entries: Optional[List[ScheduleEntry]] = None) -> List[EntryDetails]:
        snap = self.store.snapshot(TEACHERS, SECTIONS, CLASSES)
        teachers = {r["id"]: Teacher.from_record(r) for r in snap[TEACHERS]}
        sections = {r["id"]: Section.from_record(r) for r in snap[SECTIONS]}
        classes = {r["id"]: SchoolClass.from_record(r) for r in snap[CLASSES]}
        out = []
        for e in (entries if entries is not None else self._load()):
            t = teachers.get(e.teacher_id)
            s = sections.get(e.section_id)
            c = classes.get(s.class_id) if s else None
            out.append(EntryDetails(
                entry=e,
                teacher_name=t.name if t else UNKNOWN_LABEL,
                section_name=s.name if s else UNKNOWN_LABEL,
                class_name=c.name if c else UNKNOWN_LABEL,
            ))
        return out

    def section_grid(self, section_id: str) -> Dict:
        """Period x day matrix for one section; empty slots are ``None``."""
        details = {d.entry.slot[1:]: d for d in self.with_details(self.list_by_section(section_id))}
        rows = []
        for period in range(1, PERIODS_PER_DAY + 1):
            cells = []
            for day in range(DAYS_PER_WEEK):
                d = details.get((period, day))
                cells.append(d.to_dict() if d else None)
            rows.append({"period": period, "label": period_label(period), "days": cells})
        return {
            "sectionId": section_id,
            "days": [{"number": d, "label": day_label(d)} for d in range(DAYS_PER_WEEK)],
            "periods": rows,
        }
