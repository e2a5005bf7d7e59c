from __future__ import annotations

import logging
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def error_body(status: int, message, error: str) -> dict:
    return {
        "statusCode": status,
        "message": message,
        "error": error,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "path": request.path,
    }


def register_error_handlers(app: Flask) -> None:
    """Render every uncaught exception as the JSON error envelope."""

    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        return jsonify(error_body(exc.status_code, str(exc), exc.error)), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        status = exc.code or 500
        return jsonify(error_body(status, exc.description or exc.name, exc.name)), status

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.path)
        message = str(exc) or "Internal server error"
        return jsonify(error_body(500, message, "Internal Server Error")), 500
