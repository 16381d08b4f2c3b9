from __future__ import annotations
from dataclasses import dataclass

# ordered alphabet of section letters
SECTION_LETTERS = ("أ", "ب", "ج", "د", "هـ", "و", "ز")


@dataclass
class Section:
    """A class-group with its own weekly timetable, e.g. "الصف السادس أ".

    ``class_id`` only points back at the parent class; deleting a section never
    touches the class.
    """
    id: str
    class_id: str
    name: str
    section_letter: str
    created_at: int = 0

    @classmethod
    def from_record(cls, rec: dict) -> "Section":
        return cls(
            id=rec["id"],
            class_id=rec.get("classId", ""),
            name=rec.get("name", ""),
            section_letter=rec.get("sectionLetter", ""),
            created_at=rec.get("createdAt", 0),
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "classId": self.class_id,
            "name": self.name,
            "sectionLetter": self.section_letter,
            "createdAt": self.created_at,
        }
