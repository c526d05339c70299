# docnum/utils/logging.py
import logging
import time
import uuid

from flask import g, has_request_context, request
from pythonjsonlogger.json import JsonFormatter


class RequestIdJsonFormatter(JsonFormatter):
    """Adds the current request_id to every record emitted inside a request."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        if has_request_context() and hasattr(g, "request_id"):
            log_record["request_id"] = g.request_id


def setup_structured_logging(app):
    """Setup structured logging with Request ID and timings."""

    log_handler = logging.StreamHandler()
    formatter = RequestIdJsonFormatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_handler.setFormatter(formatter)

    app.logger.handlers.clear()
    app.logger.addHandler(log_handler)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    @app.before_request
    def before_request_logging():
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        g.start_time = time.monotonic()

        app.logger.debug(
            "Request started",
            extra={
                "request_info": {
                    "method": request.method,
                    "path": request.path,
                    "ip": request.remote_addr,
                }
            },
        )

    @app.after_request
    def after_request_logging(response):
        start_time = getattr(g, "start_time", None)
        duration_ms = -1
        if start_time is not None:
            duration_ms = round((time.monotonic() - start_time) * 1000, 2)

        app.logger.info(
            "Request finished",
            extra={
                "response_info": {
                    "method": request.method,
                    "path": request.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                }
            },
        )
        if hasattr(g, "request_id"):
            response.headers["X-Request-ID"] = g.request_id
        return response

    @app.teardown_request
    def teardown_request_logging(exception=None):
        if exception:
            app.logger.error("Unhandled exception during request", exc_info=exception)
