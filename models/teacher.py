from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Teacher:
    id: str
    name: str
    created_at: int = 0

    @classmethod
    def from_record(cls, rec: dict) -> "Teacher":
        return cls(id=rec["id"], name=rec.get("name", ""), created_at=rec.get("createdAt", 0))

    def to_record(self) -> dict:
        return {"id": self.id, "name": self.name, "createdAt": self.created_at}
