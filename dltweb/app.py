from __future__ import annotations

import asyncio
import threading
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from dltsync.analysis import AnalysisClient
from dltsync.config import EngineSettings, load_config
from dltsync.datasource import LiveScraperSource, RecordSource, StaticFileSource
from dltsync.reconciler import Reconciler
from dltsync.synchronizer import HistorySynchronizer

from .config import AppSettings, load_settings
from .db import create_session_factory
from .routes.analysis import bp as analysis_bp
from .routes.history import bp as history_bp
from .services.history_store import SqlHistoryStore
from .state import EXTENSION_KEY, HistoryContext


def start_background_sync(app: Flask, synchronizer: HistorySynchronizer) -> threading.Thread:
    def _run() -> None:
        result = asyncio.run(synchronizer.trigger())
        if result:
            app.logger.info("Startup sync merged %s records; %s total", result.fetched, result.total)

    thread = threading.Thread(target=_run, name="dltsync-startup-sync", daemon=True)
    thread.start()
    return thread


def create_app(
    settings: Optional[AppSettings] = None,
    engine_settings: Optional[EngineSettings] = None,
    live_source: Optional[RecordSource] = None,
    analysis_client: Optional[AnalysisClient] = None,
) -> Flask:
    settings = settings or load_settings()
    engine_settings = engine_settings or load_config()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.flask.secret_key

    factory = create_session_factory(settings.database_url)
    reconciler = Reconciler(SqlHistoryStore(factory, key=settings.history_key))
    asyncio.run(reconciler.bootstrap(StaticFileSource(engine_settings.dataset_path)))

    source = live_source or LiveScraperSource(engine_settings.scraper)
    synchronizer = HistorySynchronizer(
        reconciler, source, poll_interval_seconds=engine_settings.poll_interval_seconds
    )
    app.extensions[EXTENSION_KEY] = HistoryContext(
        settings=engine_settings,
        reconciler=reconciler,
        synchronizer=synchronizer,
        analysis_client=analysis_client,
    )

    app.register_blueprint(history_bp, url_prefix="/history")
    app.register_blueprint(analysis_bp)

    @app.get("/health")
    def health():
        context = app.extensions[EXTENSION_KEY]
        return jsonify(
            {
                "status": "ok",
                "records": len(context.reconciler.history),
                "syncing": context.synchronizer.is_syncing,
            }
        )

    @app.errorhandler(Exception)
    def handle_error(exc: Exception):
        if isinstance(exc, HTTPException):
            return exc
        app.logger.exception("Unhandled error: %s", exc)
        return jsonify({"error": str(exc)}), 500

    if settings.sync_on_startup:
        start_background_sync(app, synchronizer)

    return app
