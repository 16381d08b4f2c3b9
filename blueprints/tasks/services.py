# blueprints/tasks/services.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional

from blueprints.directory.cascade import cascade_delete
from models import Task, TaskCompletion, Teacher
from record_store import (
    RecordStore, TASKS, TASK_COMPLETIONS, TEACHERS, generate_id, now_ms,
)


def _percent(done: int, total: int) -> int:
    # half-up, so 12.5 shows as 13
    return int(done * 100 / total + 0.5) if total > 0 else 0


@dataclass
class TaskStats:
    task: Task
    completions: List[TaskCompletion]
    completed_count: int
    total_teachers: int
    completion_percentage: int

    def to_dict(self) -> dict:
        d = self.task.to_record()
        d.update({
            "completions": [c.to_record() for c in self.completions],
            "completedCount": self.completed_count,
            "totalTeachers": self.total_teachers,
            "completionPercentage": self.completion_percentage,
        })
        return d


@dataclass
class TeacherRow:
    teacher: Teacher
    completions: Dict[str, TaskCompletion]  # task_id -> completion
    completed_count: int
    total_tasks: int
    completion_percentage: int

    def to_dict(self) -> dict:
        return {
            "teacher": self.teacher.to_record(),
            "completions": {tid: c.to_record() for tid, c in self.completions.items()},
            "completedCount": self.completed_count,
            "totalTasks": self.total_tasks,
            "completionPercentage": self.completion_percentage,
        }


class TaskTracker:
    """Task x teacher completion matrix."""

    def __init__(self, store: RecordStore):
        self.store = store

    def _completions(self, for_update: bool = False) -> List[TaskCompletion]:
        read = self.store.read_for_update if for_update else self.store.read
        return [TaskCompletion.from_record(r) for r in read(TASK_COMPLETIONS)]

    def _save_completions(self, items: List[TaskCompletion]) -> bool:
        return self.store.write(TASK_COMPLETIONS, [c.to_record() for c in items])

    # ---------- tasks ----------
    def list_tasks(self) -> List[Task]:
        return [Task.from_record(r) for r in self.store.read(TASKS)]

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.list_tasks() if t.id == task_id), None)

    def create_task(self, name: str, description: str | None = None) -> Task:
        snap = self.store.snapshot(TASKS, TEACHERS, TASK_COMPLETIONS, for_update=True)
        task = Task(id=generate_id(), name=name.strip(),
                    description=(description or "").strip() or None, created_at=now_ms())
        completions = snap[TASK_COMPLETIONS] + [
            TaskCompletion(id=generate_id(), task_id=task.id, teacher_id=t["id"],
                           created_at=now_ms()).to_record()
            for t in snap[TEACHERS]
        ]
        self.store.commit({TASKS: snap[TASKS] + [task.to_record()], TASK_COMPLETIONS: completions})
        return task

    def update_task(self, task_id: str, name: str, description: str | None = None) -> Optional[Task]:
        tasks = [Task.from_record(r) for r in self.store.read_for_update(TASKS)]
        task = next((t for t in tasks if t.id == task_id), None)
        if task is None:
            return None
        task.name = name.strip()
        task.description = (description or "").strip() or None
        self.store.write(TASKS, [t.to_record() for t in tasks])
        return task

    def delete_task(self, task_id: str) -> bool:
        plan = cascade_delete(self.store, task_ids=[task_id])
        return bool(plan.tasks)

    # ---------- completions ----------
    def get_completion(self, task_id: str, teacher_id: str) -> Optional[TaskCompletion]:
        return next((c for c in self._completions()
                     if c.task_id == task_id and c.teacher_id == teacher_id), None)

    def update_completion(self, completion_id: str, completed: bool,
                          notes: str | None = None) -> Optional[TaskCompletion]:
        items = self._completions(for_update=True)
        c = next((x for x in items if x.id == completion_id), None)
        if c is None:
            return None
        c.completed = completed
        c.completed_at = now_ms() if completed else None
        c.notes = (notes or "").strip() or None
        self._save_completions(items)
        return c

    def toggle(self, task_id: str, teacher_id: str, notes: str | None = None) -> TaskCompletion:
        items = self._completions(for_update=True)
        c = next((x for x in items if x.task_id == task_id and x.teacher_id == teacher_id), None)
        if c is None:
            # no row yet: the first toggle marks it done
            c = TaskCompletion(id=generate_id(), task_id=task_id, teacher_id=teacher_id,
                               created_at=now_ms())
            items.append(c)
            c.completed = True
        else:
            c.completed = not c.completed
        c.completed_at = now_ms() if c.completed else None
        c.notes = (notes or "").strip() or None
        self._save_completions(items)
        return c

    def mark_all_complete(self, task_id: str) -> int:
        items = self._completions(for_update=True)
        changed = 0
        for c in items:
            if c.task_id == task_id and not c.completed:
                c.completed, c.completed_at = True, now_ms()
                changed += 1
        if changed:
            self._save_completions(items)
        return changed

    def reset_all(self, task_id: str) -> int:
        items = self._completions(for_update=True)
        changed = 0
        for c in items:
            if c.task_id == task_id and c.completed:
                c.completed, c.completed_at, c.notes = False, None, None
                changed += 1
        if changed:
            self._save_completions(items)
        return changed

    # ---------- statistics ----------
    def tasks_with_stats(self) -> List[TaskStats]:
        snap = self.store.snapshot(TASKS, TEACHERS, TASK_COMPLETIONS)
        total_teachers = len(snap[TEACHERS])
        completions = [TaskCompletion.from_record(r) for r in snap[TASK_COMPLETIONS]]
        out = []
        for rec in snap[TASKS]:
            task = Task.from_record(rec)
            mine = [c for c in completions if c.task_id == task.id]
            done = sum(1 for c in mine if c.completed)
            out.append(TaskStats(task, mine, done, total_teachers, _percent(done, total_teachers)))
        return out

    def teacher_grid(self) -> List[TeacherRow]:
        snap = self.store.snapshot(TASKS, TEACHERS, TASK_COMPLETIONS)
        total_tasks = len(snap[TASKS])
        completions = [TaskCompletion.from_record(r) for r in snap[TASK_COMPLETIONS]]
        rows = []
        for rec in snap[TEACHERS]:
            teacher = Teacher.from_record(rec)
            mine = {c.task_id: c for c in completions if c.teacher_id == teacher.id}
            done = sum(1 for c in mine.values() if c.completed)
            rows.append(TeacherRow(teacher, mine, done, total_tasks, _percent(done, total_tasks)))
        return rows
