from __future__ import annotations
from io import BytesIO
import json
import pytest

from app import create_app
from record_store import MemoryRecordStore, StoreUnavailable

@pytest.fixture()
def client():
    app = create_app("test", store=MemoryRecordStore())
    with app.test_client() as c:
        yield c

def _school(client):
    ahmad = client.post("/api/v1/teachers", json={"name": "أحمد"}).get_json()
    sara = client.post("/api/v1/teachers", json={"name": "سارة"}).get_json()
    klass = client.post("/api/v1/classes", json={"name": "الصف السادس"}).get_json()
    section = client.post(f"/api/v1/classes/{klass['id']}/sections",
                          json={"sectionLetter": "أ"}).get_json()
    return ahmad, sara, klass, section

def _assign(client, section, period, day, teacher):
    return client.put("/api/v1/schedule/slot", json={
        "sectionId": section["id"], "period": period, "dayOfWeek": day, "teacherId": teacher["id"],
    })

def test_teacher_crud(client):
    r = client.post("/api/v1/teachers", json={"name": "  أحمد  "})
    assert r.status_code == 201
    # Arabic goes out as UTF-8, not \u escapes
    assert "أحمد" in r.get_data(as_text=True)
    t = r.get_json()
    assert t["name"] == "أحمد"
    assert r.headers["Location"].endswith(f"/api/v1/teachers/{t['id']}")

    assert client.get(f"/api/v1/teachers/{t['id']}").status_code == 200
    r = client.put(f"/api/v1/teachers/{t['id']}", json={"name": "أحمد علي"})
    assert r.get_json()["name"] == "أحمد علي"
    assert len(client.get("/api/v1/teachers").get_json()["items"]) == 1

    assert client.delete(f"/api/v1/teachers/{t['id']}").status_code == 204
    assert client.delete(f"/api/v1/teachers/{t['id']}").status_code == 404
    assert client.get(f"/api/v1/teachers/{t['id']}").status_code == 404

def test_validation_errors_are_422(client):
    r = client.post("/api/v1/teachers", json={"name": "x"})
    assert r.status_code == 422
    assert r.get_json()["ok"] is False
    klass = client.post("/api/v1/classes", json={"name": "الصف الأول"}).get_json()
    r = client.post(f"/api/v1/classes/{klass['id']}/sections", json={"sectionLetter": "Q"})
    assert r.status_code == 422
    r = client.get("/api/v1/schedule/period?period=9&day=0")
    assert r.status_code == 422

def test_section_for_missing_class_is_404(client):
    r = client.post("/api/v1/classes/nope/sections", json={"sectionLetter": "أ"})
    assert r.status_code == 404

def test_class_listing_includes_sections(client):
    _, _, klass, section = _school(client)
    items = client.get("/api/v1/classes").get_json()["items"]
    assert items[0]["sections"][0]["id"] == section["id"]
    rows = client.get("/api/v1/sections").get_json()["items"]
    assert rows[0]["className"] == "الصف السادس"
    assert client.delete(f"/api/v1/classes/{klass['id']}").status_code == 204
    assert client.get("/api/v1/sections").get_json()["items"] == []

def test_assign_and_read_schedule(client):
    ahmad, sara, _, section = _school(client)
    r = _assign(client, section, 1, 0, ahmad)
    assert r.status_code == 200
    assert r.get_json()["warnings"] == []
    entry_id = r.get_json()["entry"]["id"]
    # upsert keeps the id
    r = _assign(client, section, 1, 0, sara)
    assert r.get_json()["entry"]["id"] == entry_id

    grid = client.get(f"/api/v1/schedule/section/{section['id']}").get_json()
    assert grid["periods"][0]["days"][0]["teacherName"] == "سارة"
    items = client.get("/api/v1/schedule/period?period=1&day=0").get_json()["items"]
    assert [i["id"] for i in items] == [entry_id]
    assert client.get("/api/v1/schedule/section/nope").status_code == 404
    assert len(client.get("/api/v1/schedule/meta").get_json()["periods"]) == 8

def test_assign_unknown_teacher_is_404(client):
    _, _, _, section = _school(client)
    r = _assign(client, section, 1, 0, {"id": "ghost"})
    assert r.status_code == 404

def test_double_booking_is_reported(client):
    ahmad, _, klass, section = _school(client)
    other = client.post(f"/api/v1/classes/{klass['id']}/sections",
                        json={"sectionLetter": "ب"}).get_json()
    _assign(client, section, 3, 1, ahmad)
    r = _assign(client, other, 3, 1, ahmad)
    assert r.status_code == 200
    assert r.get_json()["warnings"][0]["code"] == "TEACHER_BUSY"

def test_remove_slot(client):
    ahmad, _, _, section = _school(client)
    _assign(client, section, 1, 0, ahmad)
    q = {"sectionId": section["id"], "period": 1, "dayOfWeek": 0}
    assert client.delete("/api/v1/schedule/slot", json=q).status_code == 204
    assert client.delete("/api/v1/schedule/slot", json=q).status_code == 404

def test_substitution_endpoints(client):
    ahmad, sara, _, section = _school(client)
    _assign(client, section, 1, 0, ahmad)
    _assign(client, section, 2, 0, sara)
    r = client.get(f"/api/v1/substitution/slot?section_id={section['id']}&period=1&day=0")
    assert r.status_code == 200
    js = r.get_json()
    assert js["absentTeacher"]["id"] == ahmad["id"]
    assert [t["name"] for t in js["available"]] == ["سارة"]

    r = client.get(f"/api/v1/substitution/available?period=2&day=0&exclude={ahmad['id']}")
    assert r.get_json()["items"] == []

    r = client.get(f"/api/v1/substitution/slot?section_id={section['id']}&period=5&day=0")
    assert r.status_code == 404
    assert r.get_json()["errors"][0]["code"] == "NO_TEACHER_ASSIGNED"

def test_swap_endpoints(client):
    ahmad, sara, _, section = _school(client)
    _assign(client, section, 1, 0, ahmad)
    _assign(client, section, 2, 0, sara)
    body = {
        "first": {"sectionId": section["id"], "period": 1, "dayOfWeek": 0},
        "second": {"sectionId": section["id"], "period": 2, "dayOfWeek": 0},
    }
    r = client.post("/api/v1/swap/validate", json=body)
    assert r.status_code == 200
    assert r.get_json()["plan"]["first"]["teacherName"] == "أحمد"

    r = client.post("/api/v1/swap", json=body)
    assert r.status_code == 200
    assert r.get_json()["first"]["teacherId"] == sara["id"]

    body["second"]["dayOfWeek"] = 1
    r = client.post("/api/v1/swap", json=body)
    assert r.status_code == 409
    assert r.get_json()["errors"][0]["code"] == "MISSING_ASSIGNMENT"

    r = client.post("/api/v1/swap", json={"first": body["first"]})
    assert r.status_code == 422

def test_task_endpoints(client):
    ahmad, sara, _, _ = _school(client)
    r = client.post("/api/v1/tasks", json={"name": "دفتر التحضير"})
    assert r.status_code == 201
    task = r.get_json()
    r = client.post(f"/api/v1/tasks/{task['id']}/toggle", json={"teacherId": ahmad["id"]})
    assert r.get_json()["completed"] is True
    stats = client.get("/api/v1/tasks").get_json()["items"][0]
    assert stats["completionPercentage"] == 50

    r = client.post(f"/api/v1/tasks/{task['id']}/complete-all")
    assert r.get_json()["changed"] == 1
    grid = client.get("/api/v1/tasks/grid").get_json()
    assert all(row["completedCount"] == 1 for row in grid["rows"])

    completion_id = grid["rows"][0]["completions"][task["id"]]["id"]
    r = client.put(f"/api/v1/completions/{completion_id}", json={"completed": False})
    assert r.get_json()["completed"] is False
    assert client.post(f"/api/v1/tasks/{task['id']}/reset").get_json()["changed"] == 1

    assert client.delete(f"/api/v1/tasks/{task['id']}").status_code == 204
    assert client.post("/api/v1/tasks/ghost/toggle", json={"teacherId": ahmad["id"]}).status_code == 404

def test_export_import_round_trip(client):
    _school(client)
    r = client.get("/api/v1/export?download=1")
    assert r.status_code == 200
    assert "attachment" in r.headers["Content-Disposition"]
    doc = json.loads(r.get_data(as_text=True))
    assert len(doc["teachers"]) == 2

    r = client.post("/api/v1/import", json={"teachers": []})
    assert r.get_json()["ok"] is True
    assert client.get("/api/v1/teachers").get_json()["items"] == []
    # classes were not in the document and survive
    assert len(client.get("/api/v1/classes").get_json()["items"]) == 1

    data = {"file": (BytesIO(json.dumps(doc).encode("utf-8")), "backup.json")}
    r = client.post("/api/v1/import", data=data, content_type="multipart/form-data")
    assert r.status_code == 200
    assert len(client.get("/api/v1/teachers").get_json()["items"]) == 2

def test_bad_import_is_400(client):
    r = client.post("/api/v1/import", data="{oops", content_type="text/plain")
    assert r.status_code == 400
    assert r.get_json()["errors"][0]["code"] == "BAD_IMPORT"

def test_unreadable_store_answers_503():
    class Unreachable(MemoryRecordStore):
        def read_for_update(self, key):
            raise StoreUnavailable(key)

    app = create_app("test", store=Unreachable())
    with app.test_client() as c:
        r = c.post("/api/v1/teachers", json={"name": "أحمد"})
        assert r.status_code == 503
        assert r.get_json()["ok"] is False
        assert c.get("/api/v1/teachers").get_json()["items"] == []
