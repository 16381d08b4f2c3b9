# blueprints/swap/services.py
"""
Swap protocol: exchange the teachers of two assigned slots on the same day.

Validation stops at the first failed rule and never mutates anything:

1. both slots have an entry with a teacher        -> MISSING_ASSIGNMENT
2. both slots are on the same day                 -> CROSS_DAY_NOT_ALLOWED
3. the slots are different                        -> SELF_SWAP
4. teacher A is free at the second slot's period  -> TEACHER_CONFLICT
   (ignoring the second entry, which A takes over)
5. teacher B is free at the first slot's period   -> TEACHER_CONFLICT

Both teacher changes are written from one snapshot in a single commit.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from models import ScheduleEntry, Teacher, day_label, period_label
from record_store import RecordStore, StoreUnavailable, SCHEDULE, TEACHERS

log = logging.getLogger(__name__)


class SwapError(str, Enum):
    MISSING_ASSIGNMENT = "MISSING_ASSIGNMENT"
    CROSS_DAY_NOT_ALLOWED = "CROSS_DAY_NOT_ALLOWED"
    SELF_SWAP = "SELF_SWAP"
    TEACHER_CONFLICT = "TEACHER_CONFLICT"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"


class SwapRejected(Exception):
    def __init__(self, code: SwapError, reason: str, details: Optional[dict] = None):
        super().__init__(reason)
        self.code = code
        self.reason = reason
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"code": self.code.value, "reason": self.reason, "details": self.details}


@dataclass(frozen=True)
class SlotSelector:
    section_id: str
    period: int
    day_of_week: int

    def to_dict(self) -> dict:
        return {"sectionId": self.section_id, "period": self.period, "dayOfWeek": self.day_of_week}


@dataclass
class SwapSide:
    selector: SlotSelector
    entry: ScheduleEntry
    teacher: Teacher


@dataclass
class SwapPlan:
    first: SwapSide
    second: SwapSide

    def to_dict(self) -> dict:
        return {
            "first": {**self.first.selector.to_dict(), "entryId": self.first.entry.id,
                      "teacherId": self.first.teacher.id, "teacherName": self.first.teacher.name},
            "second": {**self.second.selector.to_dict(), "entryId": self.second.entry.id,
                       "teacherId": self.second.teacher.id, "teacherName": self.second.teacher.name},
        }


@dataclass
class SwapResult:
    first: ScheduleEntry
    second: ScheduleEntry
    message: str = "تم تبديل الجداول بنجاح"

    def to_dict(self) -> dict:
        return {"first": self.first.to_record(), "second": self.second.to_record(), "message": self.message}


def _resolve(entries: List[ScheduleEntry], teachers: Dict[str, Teacher],
             selector: SlotSelector) -> Optional[SwapSide]:
    key = (selector.section_id, selector.period, selector.day_of_week)
    entry = next((e for e in entries if e.slot == key), None)
    if entry is None or not entry.teacher_id:
        return None
    teacher = teachers.get(entry.teacher_id)
    if teacher is None:
        return None
    return SwapSide(selector=selector, entry=entry, teacher=teacher)


def _conflict(entries: List[ScheduleEntry], teacher: Teacher, target: SwapSide) -> None:
    """Fail if ``teacher`` already teaches elsewhere at ``target``'s period+day."""
    period, day = target.selector.period, target.selector.day_of_week
    clashes = [
        e for e in entries
        if e.period == period and e.day_of_week == day
        and e.teacher_id == teacher.id and e.id != target.entry.id
    ]
    if clashes:
        raise SwapRejected(
            SwapError.TEACHER_CONFLICT,
            f"لا يمكن التبديل: المعلم {teacher.name} لديه حصة أخرى في {period_label(period)} يوم {day_label(day)}",
            {
                "teacherId": teacher.id,
                "teacherName": teacher.name,
                "slot": {"period": period, "dayOfWeek": day},
                "conflictingEntryIds": [e.id for e in clashes],
            },
        )


def _plan(snapshot: Dict[str, List[dict]], first: SlotSelector, second: SlotSelector) -> SwapPlan:
    entries = [ScheduleEntry.from_record(r) for r in snapshot[SCHEDULE]]
    teachers = {r["id"]: Teacher.from_record(r) for r in snapshot[TEACHERS]}

    a = _resolve(entries, teachers, first)
    if a is None:
        raise SwapRejected(SwapError.MISSING_ASSIGNMENT, "الحصة الأولى ليس لها معلم مُعيّن",
                           {"side": "first", "slot": first.to_dict()})
    b = _resolve(entries, teachers, second)
    if b is None:
        raise SwapRejected(SwapError.MISSING_ASSIGNMENT, "الحصة الثانية ليس لها معلم مُعيّن",
                           {"side": "second", "slot": second.to_dict()})

    if first.day_of_week != second.day_of_week:
        raise SwapRejected(SwapError.CROSS_DAY_NOT_ALLOWED, "لا يمكن التبديل بين حصص أيام مختلفة",
                           {"first": first.day_of_week, "second": second.day_of_week})

    if first == second:
        raise SwapRejected(SwapError.SELF_SWAP, "لا يمكن تبديل الحصة مع نفسها", {"slot": first.to_dict()})

    # A moves into b's slot, B moves into a's slot
    _conflict(entries, a.teacher, b)
    _conflict(entries, b.teacher, a)
    return SwapPlan(first=a, second=b)


def validate_swap(store: RecordStore, first: SlotSelector, second: SlotSelector) -> SwapPlan:
    return _plan(store.snapshot(SCHEDULE, TEACHERS), first, second)


def swap_teachers(store: RecordStore, first: SlotSelector, second: SlotSelector) -> SwapResult:
    try:
        snapshot = store.snapshot(SCHEDULE, TEACHERS, for_update=True)
    except StoreUnavailable as e:
        raise SwapRejected(SwapError.PERSISTENCE_FAILURE, "فشل في تبديل الجداول",
                           {"store_key": e.key}) from e
    plan = _plan(snapshot, first, second)

    a_id, b_id = plan.first.entry.id, plan.second.entry.id
    new_teacher = {a_id: plan.second.teacher.id, b_id: plan.first.teacher.id}
    records = []
    for rec in snapshot[SCHEDULE]:
        if rec.get("id") in new_teacher:
            rec = {**rec, "teacherId": new_teacher[rec["id"]]}
        records.append(rec)

    if not store.write(SCHEDULE, records):
        raise SwapRejected(SwapError.PERSISTENCE_FAILURE, "فشل في تبديل الجداول",
                           {"first": a_id, "second": b_id})

    log.info("teachers swapped", extra={"first_entry": a_id, "second_entry": b_id,
                                        "day_of_week": first.day_of_week})
    updated = {r["id"]: ScheduleEntry.from_record(r) for r in records if r.get("id") in new_teacher}
    return SwapResult(first=updated[a_id], second=updated[b_id])


# ---------- interactive session ----------
class SwapState(str, Enum):
    SELECTING = "selecting"
    VALIDATED = "validated"
    COMMITTED = "committed"
    REJECTED = "rejected"


@dataclass
class SwapSession:
    """Two-sided selection for a swap screen.

    SELECTING until both sides point at existing entries, then VALIDATED.
    ``commit`` ends in COMMITTED (selections cleared) or REJECTED (selections
    kept, ``message`` holds the reason). Any further selection, or ``resume``,
    leaves REJECTED again.
    """
    store: RecordStore
    first: Optional[SlotSelector] = None
    second: Optional[SlotSelector] = None
    state: SwapState = SwapState.SELECTING
    message: Optional[str] = None
    error: Optional[SwapRejected] = field(default=None, repr=False)

    def _has_entry(self, selector: Optional[SlotSelector]) -> bool:
        if selector is None:
            return False
        key = (selector.section_id, selector.period, selector.day_of_week)
        return any(ScheduleEntry.from_record(r).slot == key for r in self.store.read(SCHEDULE))

    def _refresh(self) -> SwapState:
        both = self._has_entry(self.first) and self._has_entry(self.second)
        self.state = SwapState.VALIDATED if both else SwapState.SELECTING
        return self.state

    @property
    def can_swap(self) -> bool:
        return self.state == SwapState.VALIDATED

    def select_first(self, selector: Optional[SlotSelector]) -> SwapState:
        self.first = selector
        self.message, self.error = None, None
        return self._refresh()

    def select_second(self, selector: Optional[SlotSelector]) -> SwapState:
        self.second = selector
        self.message, self.error = None, None
        return self._refresh()

    def resume(self) -> SwapState:
        if self.state == SwapState.REJECTED:
            self.message, self.error = None, None
            return self._refresh()
        return self.state

    def clear(self) -> SwapState:
        self.first = self.second = None
        self.message, self.error = None, None
        self.state = SwapState.SELECTING
        return self.state

    def commit(self) -> Optional[SwapResult]:
        if self.first is None or self.second is None:
            self.state = SwapState.REJECTED
            self.message = "يرجى اختيار كلا الحصتين"
            return None
        try:
            result = swap_teachers(self.store, self.first, self.second)
        except SwapRejected as e:
            self.state = SwapState.REJECTED
            self.message, self.error = e.reason, e
            return None
        self.first = self.second = None
        self.state = SwapState.COMMITTED
        self.message, self.error = result.message, None
        return result
