from __future__ import annotations
import os
from flask import Flask
from config import config_map
from extensions import db, migrate
from record_store import RecordStore, StoreUnavailable, build_store

def _seed_from_config(app):
    if not app.config.get("SEED_DEMO_DATA"):
        return
    with app.app_context():
        from seed import seed_demo  # локальный импорт, чтобы избежать циклов
        try:
            seed_demo(app.extensions["record_store"])
        except StoreUnavailable:
            app.logger.warning("demo seed skipped: record store unavailable")

def _migrate_schedule(app):
    if not app.config.get("MIGRATE_SCHEDULE_ON_START"):
        return
    with app.app_context():
        from blueprints.import_export.services import migrate_schedule_entries
        migrate_schedule_entries(app.extensions["record_store"])

def register_blueprints(app: Flask) -> None:
    from blueprints.core import bp as core_bp
    from blueprints.directory import bp as directory_bp
    from blueprints.schedule import bp as schedule_bp
    from blueprints.substitution import bp as substitution_bp
    from blueprints.swap import bp as swap_bp
    from blueprints.tasks import bp as tasks_bp
    from blueprints.import_export.routes import bp as import_export_bp

    # core без префикса → '/health' в корне
    app.register_blueprint(core_bp)
    app.register_blueprint(directory_bp, url_prefix="/api/v1")
    app.register_blueprint(schedule_bp, url_prefix="/api/v1")
    app.register_blueprint(substitution_bp, url_prefix="/api/v1")
    app.register_blueprint(swap_bp, url_prefix="/api/v1")
    app.register_blueprint(tasks_bp, url_prefix="/api/v1")
    app.register_blueprint(import_export_bp, url_prefix="/api/v1")

def create_app(config_name: str | None = None, store: RecordStore | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    cfg_name = config_name or os.getenv("FLASK_CONFIG", "default")
    app.config.from_object(config_map[cfg_name])
    # pytest всегда выставляет PYTEST_CURRENT_TEST: никаких файлов БД в тестах
    if os.environ.get("PYTEST_CURRENT_TEST"):
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {"connect_args": {"check_same_thread": False}})

    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        pass
    db.init_app(app)
    migrate.init_app(app, db)
    app.extensions["record_store"] = store or build_store(app.config["RECORD_STORE"])
    if app.config["RECORD_STORE"] == "sql" and store is None and app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()
    # ответы API с арабскими именами без \uXXXX
    app.json.ensure_ascii = False
    register_blueprints(app)
    _migrate_schedule(app)
    _seed_from_config(app)
    return app
