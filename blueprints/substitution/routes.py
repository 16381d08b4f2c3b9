# blueprints/substitution/routes.py
from __future__ import annotations
from flask import jsonify, request

from . import bp
from . import services as svc
from blueprints.schedule.schemas import PeriodDayIn, SlotIn
from record_store import get_store

def _query() -> dict:
    data = dict(request.args)
    if "day" in data and "dayOfWeek" not in data:
        data["dayOfWeek"] = data.pop("day")
    if "section_id" in data and "sectionId" not in data:
        data["sectionId"] = data.pop("section_id")
    return data

@bp.get("/substitution/available")
def api_available():
    q = PeriodDayIn.model_validate(_query())
    exclude = request.args.get("exclude") or None
    items = svc.find_available_teachers(get_store(), q.period, q.day_of_week, exclude_teacher_id=exclude)
    return jsonify({"items": [t.to_dict() for t in items]})

@bp.get("/substitution/slot")
def api_substitutes_for_slot():
    q = SlotIn.model_validate(_query())
    try:
        result = svc.find_substitutes(get_store(), q.section_id, q.period, q.day_of_week)
    except svc.NoTeacherAssigned as e:
        return jsonify({"ok": False, "errors": [{"code": "NO_TEACHER_ASSIGNED", "reason": e.reason}]}), 404
    return jsonify({"ok": True, **result.to_dict()})
