from __future__ import annotations
from dataclasses import dataclass

PERIODS_PER_DAY = 8
DAYS_PER_WEEK = 5
DAY_NAMES = ("الأحد", "الإثنين", "الثلاثاء", "الأربعاء", "الخميس")


def period_label(period: int) -> str:
    return f"الحصة {period}"


def day_label(day_of_week: int) -> str:
    if 0 <= day_of_week < len(DAY_NAMES):
        return DAY_NAMES[day_of_week]
    return ""


def all_periods() -> list[dict]:
    return [{"number": n, "label": period_label(n)} for n in range(1, PERIODS_PER_DAY + 1)]


def all_days() -> list[dict]:
    return [{"number": d, "label": day_label(d)} for d in range(DAYS_PER_WEEK)]


@dataclass
class ScheduleEntry:
    """``teacher_id`` teaches ``section_id`` at ``period`` on ``day_of_week``."""
    id: str
    section_id: str
    period: int
    day_of_week: int
    teacher_id: str
    created_at: int = 0

    @property
    def slot(self) -> tuple[str, int, int]:
        return (self.section_id, self.period, self.day_of_week)

    @classmethod
    def from_record(cls, rec: dict) -> "ScheduleEntry":
        return cls(
            id=rec["id"],
            section_id=rec.get("sectionId", ""),
            period=int(rec.get("period", 0)),
            # records written before days existed belong to day 0
            day_of_week=int(rec.get("dayOfWeek") or 0),
            teacher_id=rec.get("teacherId", ""),
            created_at=rec.get("createdAt", 0),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "sectionId": self.section_id,
            "period": self.period,
            "dayOfWeek": self.day_of_week,
            "teacherId": self.teacher_id,
            "createdAt": self.created_at,
        }
