from __future__ import annotations

from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from eventhub import config

bp = Blueprint("api_health", __name__)


@bp.get("/health")
def health():
    provider = current_app.extensions["mongo"]
    db_ok = provider.ping()
    now = datetime.now(timezone.utc).isoformat()

    return jsonify({
        "ok": True,
        "time_utc": now,
        "env": {
            "flask_env": config.FLASK_ENV,
            "cors_origins": config.CORS_ORIGINS,
        },
        "config": {
            "mongo_db": provider.db_name,
            "mongo_uri_set": bool(provider.uri),
        },
        "db": {
            "ping": db_ok,
        }
    })
