# blueprints/import_export/routes.py
from __future__ import annotations

from flask import Blueprint, Response, jsonify, request

from . import services as svc
from record_store import get_store

bp = Blueprint("import_export", __name__)

@bp.get("/export")
def api_export():
    body = svc.export_json(get_store())
    resp = Response(body, mimetype="application/json")
    if request.args.get("download"):
        resp.headers["Content-Disposition"] = "attachment; filename=school-data.json"
    return resp

@bp.post("/import")
def api_import():
    f = request.files.get("file")
    if f:
        # BOM-safe
        payload = f.read().decode("utf-8-sig", errors="ignore")
    else:
        payload = request.get_json(silent=True)
        if payload is None:
            payload = request.get_data(as_text=True)
    if not svc.import_data(get_store(), payload):
        return jsonify({"ok": False, "errors": [{"code": "BAD_IMPORT"}]}), 400
    return jsonify({"ok": True})
