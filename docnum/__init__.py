import os

from flask import Flask, jsonify
from prometheus_flask_exporter import PrometheusMetrics
from sqlalchemy.exc import SQLAlchemyError

from config import config_by_name
from docnum.errors import NumberingError, StorageError
from docnum.extensions import cache, cors, db, limiter, migrate

from .utils.db import enable_sqlite_immediate_transactions
from .utils.logging import setup_structured_logging


def create_app(config_name=None, config_overrides=None):
    """Application factory pattern implementation."""
    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)

    app.config.from_object(config_by_name[config_name])
    if config_overrides:
        app.config.update(config_overrides)

    setup_structured_logging(app)
    init_extensions(app)

    if app.config.get("METRICS_ENABLED", True):
        PrometheusMetrics(app)

    register_blueprints(app)
    register_error_handlers(app)

    from docnum import commands

    commands.register_commands(app)

    init_database(app)

    return app


def init_extensions(app):
    """Initialize Flask extensions."""
    db.init_app(app)

    with app.app_context():
        if db.engine.dialect.name == "sqlite" and app.config.get(
            "SQLITE_IMMEDIATE_TRANSACTIONS", True
        ):
            enable_sqlite_immediate_transactions(db.engine)

    migrate.init_app(app, db, directory="migrations")

    cors.init_app(app, origins=app.config.get("CORS_ORIGINS", "*"))

    cache.init_app(app)

    limiter.init_app(app)


def init_database(app):
    """Creates missing tables. Failing to reach the store here is fatal."""
    if not app.config.get("AUTO_CREATE_TABLES", True):
        return

    with app.app_context():
        try:
            db.create_all()
        except SQLAlchemyError as e:
            app.logger.critical(f"Cannot initialize database: {e}", exc_info=True)
            raise StorageError(
                "Cannot initialize database", details=type(e).__name__
            ) from e


def register_blueprints(app):
    """Register application blueprints."""
    from docnum.api import api_bp
    from docnum.web import web_bp

    app.register_blueprint(api_bp, url_prefix="/api")

    app.register_blueprint(web_bp)


def register_error_handlers(app):
    """Register global error handlers."""

    @app.errorhandler(NumberingError)
    def numbering_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{error.message}: {error.details}")
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(SQLAlchemyError)
    def storage_error(error):
        db.session.rollback()
        app.logger.error(f"Storage failure: {error}", exc_info=True)
        failure = StorageError("Database error", details=type(error).__name__)
        return jsonify(failure.to_dict()), 500

    @app.errorhandler(404)
    def not_found(error):
        return (
            jsonify({"success": False, "status": "error", "message": "Resource not found"}),
            404,
        )

    @app.errorhandler(405)
    def method_not_allowed(error):
        return (
            jsonify({"success": False, "status": "error", "message": "Method not allowed"}),
            405,
        )

    @app.errorhandler(429)
    def ratelimit_handler(error):
        return (
            jsonify(
                {
                    "success": False,
                    "status": "error",
                    "message": "Rate limit exceeded",
                    "retry_after": error.description,
                }
            ),
            429,
        )

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        app.logger.error(f"Internal server error: {error}", exc_info=True)
        return (
            jsonify({"success": False, "status": "error", "message": "Internal server error"}),
            500,
        )
