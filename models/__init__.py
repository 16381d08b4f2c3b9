from models.store_record import StoreRecord
from models.teacher import Teacher
from models.school_class import SchoolClass
from models.section import Section, SECTION_LETTERS
from models.schedule import (
    ScheduleEntry, PERIODS_PER_DAY, DAYS_PER_WEEK, DAY_NAMES,
    period_label, day_label, all_periods, all_days,
)
from models.task import Task, TaskCompletion

# shown when a referenced record no longer exists
UNKNOWN_LABEL = "غير معروف"

__all__ = [
    "StoreRecord", "Teacher", "SchoolClass", "Section", "SECTION_LETTERS",
    "ScheduleEntry", "PERIODS_PER_DAY", "DAYS_PER_WEEK", "DAY_NAMES",
    "period_label", "day_label", "all_periods", "all_days",
    "Task", "TaskCompletion", "UNKNOWN_LABEL",
]
