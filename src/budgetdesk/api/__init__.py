"""Flask REST API for budgetdesk."""

import logging
from typing import Optional

from flask import Flask

from budgetdesk.api.context import EXTENSION_KEY
from budgetdesk.api.errors import register_error_handlers
from budgetdesk.api.responses import ok
from budgetdesk.api.routes import auth, budgets, categories, dashboard, expenses, transactions, users
from budgetdesk.config import Config, configure_logging
from budgetdesk.database.base import Database
from budgetdesk.database.factories import create_database
from budgetdesk.domain.auth import AuthService

logger = logging.getLogger(__name__)

BLUEPRINTS = (auth, budgets, expenses, categories, transactions, users, dashboard)


def create_app(config: Optional[Config] = None, db: Optional[Database] = None) -> Flask:
    """Build the API application.

    Args:
        config: Settings; read from the environment when omitted
        db: Database to serve; built from ``config`` when omitted

    Returns:
        Configured Flask app
    """
    config = config or Config.from_env()
    configure_logging(config.log_level)

    app = Flask(__name__)
    app.config.update(SECRET_KEY=config.secret_key, TESTING=config.testing)
    app.url_map.strict_slashes = False

    if db is None:
        db = create_database(database_url=config.database_url, database_path=config.database_path)
    db.connect()
    db.initialize_schema()

    app.extensions[EXTENSION_KEY] = {
        "db": db,
        "auth": AuthService(db, config.secret_key, config.token_ttl_hours),
    }

    register_error_handlers(app)
    for module in BLUEPRINTS:
        app.register_blueprint(module.bp)

    @app.get("/health")
    def health():
        return ok({"status": "ok"})

    @app.teardown_appcontext
    def release_session(exc):
        db.disconnect()

    logger.info("API ready (%d blueprints)", len(BLUEPRINTS))
    return app
