from __future__ import annotations
import logging

from app import create_app
from record_store import MemoryRecordStore, SCHEDULE
from blueprints.core.routes import JSONFormatter

def test_health_ok():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/health")
        assert rv.status_code == 200
        data = rv.get_json()
        assert data["status"] == "ok"
        assert data["ts"].endswith("Z")

def test_unknown_route_is_json_404():
    app = create_app("test")
    with app.test_client() as c:
        rv = c.get("/api/v1/nothing-here")
        assert rv.status_code == 404
        data = rv.get_json()
        assert data["ok"] is False and data["status"] == 404

def test_json_formatter_keeps_request_fields():
    rec = logging.LogRecord("app.request", logging.INFO, __file__, 1, "request handled", None, None)
    rec.path, rec.status = "/health", 200
    out = JSONFormatter().format(rec)
    assert '"path": "/health"' in out
    assert '"status": 200' in out

def test_startup_migrates_legacy_schedule():
    store = MemoryRecordStore({SCHEDULE: [{"id": "e1", "sectionId": "s1", "period": 1, "teacherId": "t1"}]})
    create_app("test", store=store)
    assert store.read(SCHEDULE)[0]["dayOfWeek"] == 0

def test_demo_seed_is_idempotent():
    from seed import seed_demo
    store = MemoryRecordStore()
    first = seed_demo(store)
    assert first["teachers"] == 2 and first["entries"] == 10
    assert not any(seed_demo(store).values())
