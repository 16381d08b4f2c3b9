"""
Key-value record store.

Every entity collection lives under one key as a plain array of JSON records.
Services read a snapshot, compute the next state and hand all changed
collections to ``commit`` at once, so multi-collection changes (cascades,
swaps) land in a single write.

A broken read yields ``[]`` for display, while ``read_for_update`` raises
``StoreUnavailable`` so a read-modify-write never commits a half-empty
collection. A failed write is rolled back, logged and reported as ``False``.
"""
from __future__ import annotations
import copy
import json
import logging
import random
import string
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import StoreRecord

log = logging.getLogger(__name__)

TEACHERS = "school_teachers"
CLASSES = "school_classes"
SECTIONS = "school_sections"
SCHEDULE = "school_schedule"
TASKS = "school_tasks"
TASK_COMPLETIONS = "school_task_completions"

ALL_KEYS = (TEACHERS, CLASSES, SECTIONS, SCHEDULE, TASKS, TASK_COMPLETIONS)

_ID_ALPHABET = string.digits + string.ascii_lowercase

Records = List[dict]


class StoreUnavailable(RuntimeError):
    """A collection could not be read, so nothing may be written from it."""

    def __init__(self, key: str):
        super().__init__(f"record store unavailable for {key}")
        self.key = key


class RecordNotFound(LookupError):
    """Lookup by id found no record."""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}: no record with id {record_id!r}")
        self.collection = collection
        self.record_id = record_id


def now_ms() -> int:
    return int(time.time() * 1000)


def generate_id() -> str:
    # <epoch ms>-<9 base36 chars>, same shape as ids in exported files
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{now_ms()}-{suffix}"


class RecordStore(ABC):
    @abstractmethod
    def read(self, key: str) -> Records:
        """Return a private copy of the collection stored under ``key``."""

    @abstractmethod
    def commit(self, changes: Dict[str, Records]) -> bool:
        """Replace every collection in ``changes`` in one step."""

    @abstractmethod
    def clear(self, keys: Optional[Iterable[str]] = None) -> None:
        ...

    def write(self, key: str, records: Records) -> bool:
        return self.commit({key: records})

    def read_for_update(self, key: str) -> Records:
        """Like ``read``, but raises ``StoreUnavailable`` instead of returning
        an empty list when the store cannot be reached.

        Use it whenever the result is written back.
        """
        return self.read(key)

    def snapshot(self, *keys: str, for_update: bool = False) -> Dict[str, Records]:
        reader = self.read_for_update if for_update else self.read
        return {k: reader(k) for k in keys}


class MemoryRecordStore(RecordStore):
    """Process-local store, used by tests and ``RECORD_STORE=memory``."""

    def __init__(self, initial: Optional[Dict[str, Records]] = None):
        self._data: Dict[str, Records] = {}
        for key, records in (initial or {}).items():
            self._data[key] = copy.deepcopy(list(records))

    def read(self, key: str) -> Records:
        return copy.deepcopy(self._data.get(key, []))

    def commit(self, changes: Dict[str, Records]) -> bool:
        staged = {k: copy.deepcopy(list(v)) for k, v in changes.items()}
        self._data.update(staged)
        return True

    def clear(self, keys: Optional[Iterable[str]] = None) -> None:
        for key in list(keys if keys is not None else self._data.keys()):
            self._data.pop(key, None)


class SqlRecordStore(RecordStore):
    """Stores each collection as one ``store_record`` row (Flask-SQLAlchemy)."""

    def read(self, key: str) -> Records:
        return self._load(key, strict=False)

    def read_for_update(self, key: str) -> Records:
        return self._load(key, strict=True)

    def _load(self, key: str, strict: bool) -> Records:
        try:
            row = db.session.get(StoreRecord, key)
        except SQLAlchemyError as exc:
            db.session.rollback()
            log.exception("record store read failed", extra={"store_key": key})
            if strict:
                raise StoreUnavailable(key) from exc
            return []
        if row is None:
            return []
        payload = row.payload
        if isinstance(payload, str):
            # rows edited by hand may hold the array as text
            try:
                payload = json.loads(payload)
            except ValueError:
                log.warning("corrupt record payload", extra={"store_key": key})
                return []
        if not isinstance(payload, list):
            log.warning("record payload is not an array", extra={"store_key": key})
            return []
        return copy.deepcopy(payload)

    def commit(self, changes: Dict[str, Records]) -> bool:
        try:
            for key, records in changes.items():
                payload = copy.deepcopy(list(records))
                row = db.session.get(StoreRecord, key)
                if row is None:
                    db.session.add(StoreRecord(key=key, payload=payload))
                else:
                    row.payload = payload
                    row.updated_at = datetime.utcnow()
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            log.exception("record store write failed", extra={"store_keys": sorted(changes)})
            return False
        return True

    def clear(self, keys: Optional[Iterable[str]] = None) -> None:
        try:
            q = db.session.query(StoreRecord)
            if keys is not None:
                q = q.filter(StoreRecord.key.in_(list(keys)))
            q.delete(synchronize_session=False)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            log.exception("record store clear failed")


def build_store(kind: str) -> RecordStore:
    if kind == "memory":
        return MemoryRecordStore()
    if kind == "sql":
        return SqlRecordStore()
    raise ValueError(f"unknown RECORD_STORE {kind!r}")


def get_store() -> RecordStore:
    return current_app.extensions["record_store"]
