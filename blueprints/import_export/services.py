# blueprints/import_export/services.py
"""
Full-state JSON export/import and the schedule day migration.

Import replaces only the collections present in the document and does not
check cross-references; the document is trusted to be consistent.
"""
from __future__ import annotations
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from record_store import (
    RecordStore, StoreUnavailable, ALL_KEYS, TEACHERS, CLASSES, SECTIONS, SCHEDULE, TASKS, TASK_COMPLETIONS,
)

log = logging.getLogger(__name__)

# document field -> store key
EXPORT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("teachers", TEACHERS),
    ("classes", CLASSES),
    ("sections", SECTIONS),
    ("schedule", SCHEDULE),
    ("tasks", TASKS),
    ("taskCompletions", TASK_COMPLETIONS),
)


def export_data(store: RecordStore) -> Dict[str, Any]:
    snap = store.snapshot(*(key for _, key in EXPORT_FIELDS))
    doc: Dict[str, Any] = {field: snap[key] for field, key in EXPORT_FIELDS}
    doc["exportedAt"] = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return doc


def export_json(store: RecordStore) -> str:
    return json.dumps(export_data(store), ensure_ascii=False, indent=2)


def import_data(store: RecordStore, payload: Any) -> bool:
    """Accepts a parsed document or its JSON text. Returns False on bad input."""
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError:
            log.warning("import rejected: not valid JSON")
            return False
    if not isinstance(payload, dict):
        log.warning("import rejected: document is not an object")
        return False

    changes = {}
    for field, key in EXPORT_FIELDS:
        value = payload.get(field)
        # missing keys leave the stored collection untouched
        if value is not None:
            if not isinstance(value, list):
                log.warning("import rejected: field is not an array", extra={"field": field})
                return False
            changes[key] = value
    if not changes:
        return True
    ok = store.commit(changes)
    log.info("data imported", extra={"collections": sorted(changes), "persisted": ok})
    return ok


def migrate_schedule_entries(store: RecordStore) -> int:
    """Give day 0 to entries saved before the timetable had days."""
    try:
        records = store.read_for_update(SCHEDULE)
    except StoreUnavailable:
        # table may not exist yet (before alembic upgrade); retried on next start
        log.warning("schedule migration skipped: store unavailable")
        return 0
    migrated = 0
    for rec in records:
        if rec.get("dayOfWeek") is None:
            rec["dayOfWeek"] = 0
            migrated += 1
    if migrated:
        store.write(SCHEDULE, records)
        log.info("schedule entries migrated to include dayOfWeek", extra={"migrated": migrated})
    return migrated


def clear_all_data(store: RecordStore) -> None:
    store.clear(ALL_KEYS)
