from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field

from models import PERIODS_PER_DAY, DAYS_PER_WEEK


class PeriodDayIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    period: int = Field(ge=1, le=PERIODS_PER_DAY)
    day_of_week: int = Field(alias="dayOfWeek", ge=0, le=DAYS_PER_WEEK - 1)


class SlotIn(PeriodDayIn):
    section_id: str = Field(alias="sectionId", min_length=1)


class AssignIn(SlotIn):
    teacher_id: str = Field(alias="teacherId", min_length=1)
