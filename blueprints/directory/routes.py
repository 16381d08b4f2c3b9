from __future__ import annotations
import logging
from typing import Any

from flask import abort, jsonify, request, url_for

from . import bp
from .schemas import TeacherIn, ClassIn, SectionIn
from .services import RosterService
from record_store import get_store

log = logging.getLogger(__name__)

# ----------------------- Helpers -----------------------
def ok(data: Any, status: int = 200):
    return jsonify(data), status

def created(location: str, data: Any):
    resp = jsonify(data)
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp

def _roster() -> RosterService:
    return RosterService(get_store())

def _payload() -> dict:
    return request.get_json(silent=True) or {}

# ---- Teachers ----
@bp.get("/teachers")
def api_teachers_list():
    return ok({"items": [t.to_record() for t in _roster().list_teachers()]})

@bp.post("/teachers")
def api_teachers_create():
    parsed = TeacherIn.model_validate(_payload())
    t = _roster().create_teacher(parsed.name)
    return created(url_for("directory.api_teachers_get", id=t.id), t.to_record())

@bp.get("/teachers/<id>")
def api_teachers_get(id: str):
    t = _roster().get_teacher(id) or abort(404)
    return ok(t.to_record())

@bp.put("/teachers/<id>")
def api_teachers_update(id: str):
    parsed = TeacherIn.model_validate(_payload())
    t = _roster().update_teacher(id, parsed.name) or abort(404)
    return ok(t.to_record())

@bp.delete("/teachers/<id>")
def api_teachers_delete(id: str):
    if not _roster().delete_teacher(id):
        abort(404)
    return "", 204

# ---- Classes ----
@bp.get("/classes")
def api_classes_list():
    roster = _roster()
    items = []
    for c in roster.list_classes():
        d = c.to_record()
        d["sections"] = [s.to_record() for s in roster.list_sections_for_class(c.id)]
        items.append(d)
    return ok({"items": items})

@bp.post("/classes")
def api_classes_create():
    parsed = ClassIn.model_validate(_payload())
    c = _roster().create_class(parsed.name)
    return created(url_for("directory.api_classes_get", id=c.id), c.to_record())

@bp.get("/classes/<id>")
def api_classes_get(id: str):
    roster = _roster()
    c = roster.get_class(id) or abort(404)
    d = c.to_record()
    d["sections"] = [s.to_record() for s in roster.list_sections_for_class(c.id)]
    return ok(d)

@bp.put("/classes/<id>")
def api_classes_update(id: str):
    parsed = ClassIn.model_validate(_payload())
    c = _roster().update_class(id, parsed.name) or abort(404)
    return ok(c.to_record())

@bp.delete("/classes/<id>")
def api_classes_delete(id: str):
    if not _roster().delete_class(id):
        abort(404)
    return "", 204

# ---- Sections ----
@bp.get("/sections")
def api_sections_list():
    return ok({"items": [s.to_dict() for s in _roster().sections_with_class()]})

@bp.post("/classes/<class_id>/sections")
def api_sections_create(class_id: str):
    parsed = SectionIn.model_validate(_payload())
    s = _roster().create_section(class_id, parsed.section_letter, parsed.name) or abort(404)
    return created(url_for("directory.api_sections_get", id=s.id), s.to_record())

@bp.get("/sections/<id>")
def api_sections_get(id: str):
    s = _roster().get_section(id) or abort(404)
    return ok(s.to_record())

@bp.put("/sections/<id>")
def api_sections_update(id: str):
    parsed = SectionIn.model_validate(_payload())
    s = _roster().update_section(id, parsed.section_letter, parsed.name) or abort(404)
    return ok(s.to_record())

@bp.delete("/sections/<id>")
def api_sections_delete(id: str):
    if not _roster().delete_section(id):
        abort(404)
    return "", 204
