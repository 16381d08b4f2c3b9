# blueprints/swap/routes.py
from __future__ import annotations
from flask import jsonify, request
from pydantic import BaseModel

from . import bp
from .services import SlotSelector, SwapRejected, swap_teachers, validate_swap
from blueprints.schedule.schemas import SlotIn
from record_store import get_store


class SwapIn(BaseModel):
    first: SlotIn
    second: SlotIn

    def selectors(self) -> tuple[SlotSelector, SlotSelector]:
        return (
            SlotSelector(self.first.section_id, self.first.period, self.first.day_of_week),
            SlotSelector(self.second.section_id, self.second.period, self.second.day_of_week),
        )


def _rejected(e: SwapRejected):
    # все бизнес-ошибки: 409
    return jsonify({"ok": False, "errors": [e.to_dict()]}), 409


@bp.post("/swap/validate")
def api_swap_validate():
    first, second = SwapIn.model_validate(request.get_json(silent=True) or {}).selectors()
    try:
        plan = validate_swap(get_store(), first, second)
    except SwapRejected as e:
        return _rejected(e)
    return jsonify({"ok": True, "plan": plan.to_dict()})


@bp.post("/swap")
def api_swap_commit():
    first, second = SwapIn.model_validate(request.get_json(silent=True) or {}).selectors()
    try:
        result = swap_teachers(get_store(), first, second)
    except SwapRejected as e:
        return _rejected(e)
    return jsonify({"ok": True, **result.to_dict()})
