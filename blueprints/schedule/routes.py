# blueprints/schedule/routes.py
from __future__ import annotations
import logging

from flask import abort, jsonify, request

from . import bp
from .schemas import AssignIn, PeriodDayIn, SlotIn
from .services import TimetableStore
from blueprints.directory.services import RosterService
from models import all_days, all_periods
from record_store import get_store

log = logging.getLogger(__name__)

def _timetable() -> TimetableStore:
    return TimetableStore(get_store())

def _args() -> dict:
    # query-string and JSON bodies are accepted interchangeably
    data = dict(request.args)
    data.update(request.get_json(silent=True) or {})
    if "day" in data and "dayOfWeek" not in data:
        data["dayOfWeek"] = data.pop("day")
    return data

@bp.get("/schedule/meta")
def api_schedule_meta():
    return jsonify({"periods": all_periods(), "days": all_days()})

@bp.get("/schedule")
def api_schedule_list():
    tt = _timetable()
    return jsonify({"items": [d.to_dict() for d in tt.with_details()]})

@bp.get("/schedule/section/<section_id>")
def api_schedule_section(section_id: str):
    RosterService(get_store()).get_section(section_id) or abort(404)
    return jsonify(_timetable().section_grid(section_id))

@bp.get("/schedule/period")
def api_schedule_period():
    q = PeriodDayIn.model_validate(_args())
    tt = _timetable()
    entries = tt.list_by_period(q.period, q.day_of_week)
    return jsonify({"items": [d.to_dict() for d in tt.with_details(entries)]})

@bp.put("/schedule/slot")
def api_schedule_assign():
    parsed = AssignIn.model_validate(_args())
    roster = RosterService(get_store())
    if roster.get_section(parsed.section_id) is None:
        abort(404, description="section not found")
    if roster.get_teacher(parsed.teacher_id) is None:
        abort(404, description="teacher not found")

    tt = _timetable()
    entry = tt.assign(parsed.section_id, parsed.period, parsed.day_of_week, parsed.teacher_id)
    # direct assignment allows double booking, but tells the caller about it
    busy = tt.teacher_conflicts(parsed.teacher_id, parsed.period, parsed.day_of_week,
                                exclude_entry_id=entry.id)
    warnings = [{"code": "TEACHER_BUSY", "details": {"entryId": e.id, "sectionId": e.section_id}}
                for e in busy]
    if warnings:
        log.info("teacher double-booked by direct assignment",
                 extra={"teacher_id": parsed.teacher_id, "period": parsed.period,
                        "day_of_week": parsed.day_of_week})
    return jsonify({"ok": True, "entry": entry.to_record(), "warnings": warnings})

@bp.delete("/schedule/slot")
def api_schedule_remove():
    parsed = SlotIn.model_validate(_args())
    if not _timetable().remove_slot(parsed.section_id, parsed.period, parsed.day_of_week):
        abort(404)
    return "", 204
