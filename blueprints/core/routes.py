from __future__ import annotations
import json, logging
from datetime import datetime

from flask import g, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from . import bp
from record_store import StoreUnavailable

log = logging.getLogger(__name__)

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event", "path", "method", "status", "duration_ms"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["error"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)

def _setup_structured_logging(app):
    logger = app.logger
    has_json = any(
        isinstance(h, logging.StreamHandler)
        and isinstance(getattr(h, "formatter", None), JSONFormatter)
        for h in logger.handlers
    )
    if not has_json:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

def _pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors(include_url=False)
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs

@bp.before_app_request
def _start_timer():
    g._req_start = datetime.utcnow()

@bp.after_app_request
def _log_request(response: Response):
    try:
        duration_ms = int((datetime.utcnow() - g._req_start).total_seconds() * 1000)
    except AttributeError:
        duration_ms = None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    }
    # логгер уже настроен в _on_register
    logging.getLogger("app.request").info("request handled", extra=extra)
    return response

@bp.app_errorhandler(ValidationError)
def handle_validation_error(err: ValidationError):
    return jsonify({"ok": False, "errors": _pydantic_errors_safe(err)}), 422

@bp.app_errorhandler(StoreUnavailable)
def handle_store_unavailable(err: StoreUnavailable):
    # изменение отменено до записи, данные не тронуты
    log.warning("record store unavailable", extra={"path": request.path, "method": request.method})
    return jsonify({"ok": False, "error": "storage unavailable", "status": 503}), 503

@bp.app_errorhandler(HTTPException)
def handle_http_error(err: HTTPException):
    return jsonify({"ok": False, "error": err.description, "status": err.code}), err.code

@bp.app_errorhandler(Exception)
def handle_unexpected(err: Exception):
    log.exception("unhandled error", extra={"path": request.path, "method": request.method})
    return jsonify({"ok": False, "error": "internal error", "status": 500}), 500

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.utcnow().isoformat(timespec="seconds") + "Z",
    })
