# Overview: Error taxonomy shared by services and the HTTP layer.

"""
Every failure a service reports is a CredisError carrying an ErrorKind.

Routes never stringify arbitrary exceptions: the registered handler maps
each kind to exactly one HTTP status, and anything that is not a
CredisError is logged and answered with a generic 500.
"""

from __future__ import annotations

import enum

from flask import jsonify
from werkzeug.exceptions import HTTPException


class ErrorKind(enum.Enum):
    NOT_FOUND = 404
    VALIDATION = 400
    UNAUTHORIZED = 401
    CONFLICT = 409
    INTERNAL = 500

    @property
    def status_code(self) -> int:
        return self.value


class CredisError(Exception):
    """Base class for domain errors; `kind` decides the HTTP status."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CredisError):
    """404-level: a referenced customer, store, credit or owner does not exist."""
    kind = ErrorKind.NOT_FOUND


class ValidationError(CredisError, ValueError):
    """400-level input problem or business-rule violation."""
    kind = ErrorKind.VALIDATION


class UnauthorizedError(CredisError):
    """401-level: missing, invalid, expired or revoked credentials."""
    kind = ErrorKind.UNAUTHORIZED


class ConflictError(CredisError, ValueError):
    """409-level uniqueness conflict (e.g., phone number already registered)."""
    kind = ErrorKind.CONFLICT


def error_response(message: str, status_code: int):
    return jsonify({"success": False, "error": message}), status_code


def register_error_handlers(app):
    @app.errorhandler(CredisError)
    def handle_domain_error(exc: CredisError):
        if exc.kind is ErrorKind.INTERNAL:
            app.logger.error("Internal error: %s", exc.message)
            return error_response("Internal server error", 500)
        return error_response(exc.message, exc.kind.status_code)

    @app.errorhandler(HTTPException)
    def handle_http_exception(exc: HTTPException):
        return error_response(exc.description or exc.name, exc.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        # Log the exception with traceback; never echo internals to the client
        app.logger.exception("Unhandled exception occurred")
        return error_response("Internal server error", 500)
