"""
Idempotent seed-скрипт.
Запуск:
  python seed.py --reset   # очистить все коллекции и заново создать демо-данные
  python seed.py           # мягкое наполнение недостающих данных (idempotent)
"""
from __future__ import annotations
import argparse
import logging

from models import DAYS_PER_WEEK
from record_store import RecordStore, ALL_KEYS, TEACHERS, CLASSES

log = logging.getLogger(__name__)

DEMO_TEACHERS = ("أحمد", "سارة")
DEMO_CLASS = "الصف السادس"
DEMO_SECTION_LETTER = "أ"


def seed_demo(store: RecordStore) -> dict:
    """Two teachers, one class with one section and a timetable row for them.

    Existing teachers and classes are matched by name, so running it twice
    changes nothing.
    """
    from blueprints.directory.services import RosterService
    from blueprints.schedule.services import TimetableStore

    roster = RosterService(store)
    created = {"teachers": 0, "classes": 0, "sections": 0, "entries": 0}

    by_name = {t.name: t for t in roster.list_teachers()}
    for name in DEMO_TEACHERS:
        if name not in by_name:
            by_name[name] = roster.create_teacher(name)
            created["teachers"] += 1

    klass = next((c for c in roster.list_classes() if c.name == DEMO_CLASS), None)
    if klass is None:
        klass = roster.create_class(DEMO_CLASS)
        created["classes"] += 1

    section = next((s for s in roster.list_sections_for_class(klass.id)
                    if s.section_letter == DEMO_SECTION_LETTER), None)
    if section is None:
        section = roster.create_section(klass.id, DEMO_SECTION_LETTER)
        created["sections"] += 1

    # أحمد teaches period 1 and سارة period 2, every day
    tt = TimetableStore(store)
    for period, name in enumerate(DEMO_TEACHERS, start=1):
        for day in range(DAYS_PER_WEEK):
            if tt.find_slot(section.id, period, day) is None:
                tt.assign(section.id, period, day, by_name[name].id)
                created["entries"] += 1

    if any(created.values()):
        log.info("demo data seeded", extra={"created": created})
    return created


def main(argv=None):
    from app import create_app

    parser = argparse.ArgumentParser(description="Seed demo school data")
    parser.add_argument("--reset", action="store_true", help="wipe all collections first")
    args = parser.parse_args(argv)

    app = create_app()
    with app.app_context():
        store = app.extensions["record_store"]
        if args.reset:
            store.clear(ALL_KEYS)
        created = seed_demo(store)
        print(f"teachers={len(store.read(TEACHERS))} classes={len(store.read(CLASSES))} created={created}")


if __name__ == "__main__":
    main()
