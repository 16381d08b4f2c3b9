from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from blueprints.directory.schemas import NAME_MIN, NAME_MAX


class TaskIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=NAME_MIN, max_length=NAME_MAX)
    description: Optional[str] = Field(None, max_length=1000)


class ToggleIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    teacher_id: str = Field(alias="teacherId", min_length=1)
    notes: Optional[str] = Field(None, max_length=1000)


class CompletionIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    completed: bool
    notes: Optional[str] = Field(None, max_length=1000)
