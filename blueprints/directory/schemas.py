from __future__ import annotations
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .validators import ensure_section_letter

NAME_MIN = 2
NAME_MAX = 200


class _Form(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


# ---------- Teachers ----------
class TeacherIn(_Form):
    name: str = Field(min_length=NAME_MIN, max_length=NAME_MAX)


# ---------- Classes ----------
class ClassIn(_Form):
    name: str = Field(min_length=NAME_MIN, max_length=NAME_MAX)


# ---------- Sections ----------
class SectionIn(_Form):
    section_letter: str = Field(alias="sectionLetter")
    name: Optional[str] = Field(None, max_length=NAME_MAX)

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    @field_validator("section_letter")
    @classmethod
    def check_letter(cls, v: str) -> str:
        return ensure_section_letter(v)
