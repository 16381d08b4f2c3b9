# blueprints/tasks/routes.py
from __future__ import annotations
from flask import abort, jsonify, request

from . import bp
from .schemas import CompletionIn, TaskIn, ToggleIn
from .services import TaskTracker
from record_store import get_store

def _tracker() -> TaskTracker:
    return TaskTracker(get_store())

def _payload() -> dict:
    return request.get_json(silent=True) or {}

@bp.get("/tasks")
def api_tasks_list():
    return jsonify({"items": [s.to_dict() for s in _tracker().tasks_with_stats()]})

@bp.post("/tasks")
def api_tasks_create():
    parsed = TaskIn.model_validate(_payload())
    task = _tracker().create_task(parsed.name, parsed.description)
    return jsonify(task.to_record()), 201

@bp.put("/tasks/<id>")
def api_tasks_update(id: str):
    parsed = TaskIn.model_validate(_payload())
    task = _tracker().update_task(id, parsed.name, parsed.description) or abort(404)
    return jsonify(task.to_record())

@bp.delete("/tasks/<id>")
def api_tasks_delete(id: str):
    if not _tracker().delete_task(id):
        abort(404)
    return "", 204

@bp.get("/tasks/grid")
def api_tasks_grid():
    tracker = _tracker()
    return jsonify({
        "tasks": [t.to_record() for t in tracker.list_tasks()],
        "rows": [r.to_dict() for r in tracker.teacher_grid()],
    })

@bp.post("/tasks/<id>/toggle")
def api_tasks_toggle(id: str):
    parsed = ToggleIn.model_validate(_payload())
    tracker = _tracker()
    tracker.get_task(id) or abort(404)
    return jsonify(tracker.toggle(id, parsed.teacher_id, parsed.notes).to_record())

@bp.post("/tasks/<id>/complete-all")
def api_tasks_complete_all(id: str):
    tracker = _tracker()
    tracker.get_task(id) or abort(404)
    return jsonify({"ok": True, "changed": tracker.mark_all_complete(id)})

@bp.post("/tasks/<id>/reset")
def api_tasks_reset(id: str):
    tracker = _tracker()
    tracker.get_task(id) or abort(404)
    return jsonify({"ok": True, "changed": tracker.reset_all(id)})

@bp.put("/completions/<id>")
def api_completion_update(id: str):
    parsed = CompletionIn.model_validate(_payload())
    c = _tracker().update_completion(id, parsed.completed, parsed.notes) or abort(404)
    return jsonify(c.to_record())
