from typing import Optional

from flask import Flask
from flask_cors import CORS

from devevents import config


def create_app(connection=None, testing: bool = False) -> Flask:
    """
    App factory. ``connection`` is a db.mongo.ConnectionManager (or a stand-in);
    when omitted one is built from config, which fails fast without MONGODB_URI.
    """
    from devevents.api import register_api
    from devevents.db.mongo import ConnectionManager, use_connection

    app = Flask(__name__)
    app.config["SECRET_KEY"] = config.SECRET_KEY
    app.config["TESTING"] = testing
    CORS(app, origins=config.CORS_ORIGINS)

    manager: Optional[ConnectionManager] = connection or ConnectionManager.from_config()
    use_connection(manager)
    app.extensions["devevents.mongo"] = manager

    if not config.API_SECRET_KEY:
        app.logger.warning("[create_app] API_SECRET_KEY not set; admin endpoints are open")

    register_api(app)
    return app
