# docnum/web/routes.py

from datetime import UTC, datetime

from flask import current_app, jsonify
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from docnum.extensions import db

from . import web_bp


@web_bp.route("/health")
def health_check():
    """Liveness plus a round trip to the store."""
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Health check failed: {e}")
        return (
            jsonify(
                {
                    "status": "unhealthy",
                    "database": type(e).__name__,
                    "timestamp": datetime.now(UTC).isoformat(),
                }
            ),
            503,
        )
    return (
        jsonify({"status": "healthy", "timestamp": datetime.now(UTC).isoformat()}),
        200,
    )
