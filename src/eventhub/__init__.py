from __future__ import annotations

from typing import Optional

from flask import Flask
from flask_cors import CORS

from eventhub import config
from eventhub.db.mongo import MongoProvider, ensure_indexes


def create_app(provider: Optional[MongoProvider] = None) -> Flask:
    """
    Build the Flask app. Without an injected provider one is built from
    config, so a missing MONGODB_URI stops startup here.
    """
    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.SECRET_KEY
    CORS(app, origins=config.CORS_ORIGINS)

    if provider is None:
        provider = MongoProvider.from_config()
    app.extensions["mongo"] = provider

    # Ensure DB indexes early (safe to run multiple times)
    try:
        ensure_indexes(provider.get_db(), app.logger)
    except Exception as e:
        app.logger.warning(f"[create_app] ensure_indexes skipped: {e}")

    from eventhub.api import register_api
    register_api(app)

    return app
