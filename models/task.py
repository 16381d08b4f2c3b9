from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass
class Task:
    """Something every teacher has to hand in, e.g. "دفتر الحضور"."""
    id: str
    name: str
    description: Optional[str] = None
    created_at: int = 0

    @classmethod
    def from_record(cls, rec: dict) -> "Task":
        return cls(id=rec["id"], name=rec.get("name", ""),
                   description=rec.get("description"), created_at=rec.get("createdAt", 0))

    def to_record(self) -> dict:
        out = {"id": self.id, "name": self.name, "createdAt": self.created_at}
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass
class TaskCompletion:
    id: str
    task_id: str
    teacher_id: str
    completed: bool = False
    completed_at: Optional[int] = None
    notes: Optional[str] = None
    created_at: int = 0

    @classmethod
    def from_record(cls, rec: dict) -> "TaskCompletion":
        return cls(
            id=rec["id"],
            task_id=rec.get("taskId", ""),
            teacher_id=rec.get("teacherId", ""),
            completed=bool(rec.get("completed", False)),
            completed_at=rec.get("completedAt"),
            notes=rec.get("notes"),
            created_at=rec.get("createdAt", 0),
        )

    def to_record(self) -> dict:
        out = {
            "id": self.id,
            "taskId": self.task_id,
            "teacherId": self.teacher_id,
            "completed": self.completed,
            "createdAt": self.created_at,
        }
        # optional fields are left out rather than stored as null
        if self.completed_at is not None:
            out["completedAt"] = self.completed_at
        if self.notes is not None:
            out["notes"] = self.notes
        return out
