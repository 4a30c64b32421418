"""Domain errors and the Flask handlers that turn them into JSON responses.

Every service failure is a ``LibraryError`` subclass carrying an HTTP status and a
short machine-readable code. Handlers answer with the same envelope the
controllers use for success (``{"success": ..., "message": ...}``).
Persistence failures and unexpected exceptions are logged with their stack trace
and reported as a generic internal error.
"""
from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from library_app.extensions import db


class LibraryError(Exception):
    status_code = 400
    code = "error"
    default_message = "request failed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_response(self) -> dict:
        return {"success": False, "code": self.code, "message": self.message}


class ValidationError(LibraryError):
    status_code = 400
    code = "validation_error"
    default_message = "invalid input"

    def __init__(self, message: str | None = None, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []

    def to_response(self) -> dict:
        body = super().to_response()
        if self.errors:
            body["errors"] = self.errors
        return body


class NotFound(LibraryError):
    status_code = 404
    code = "not_found"
    default_message = "not found"


class DuplicateEmail(LibraryError):
    status_code = 409
    code = "duplicate_email"
    default_message = "email already exists"


class AccountInactive(LibraryError):
    status_code = 403
    code = "account_inactive"
    default_message = "your account is inactive"


class InvalidCredential(LibraryError):
    status_code = 401
    code = "invalid_credential"
    default_message = "password is incorrect"


class Conflict(LibraryError):
    status_code = 409
    code = "conflict"
    default_message = "conflicting request"


class LimitExceeded(LibraryError):
    status_code = 400
    code = "limit_exceeded"
    default_message = "borrow limit reached"


class Unauthorized(LibraryError):
    status_code = 401
    code = "unauthorized"
    default_message = "Unauthorized"


class Forbidden(LibraryError):
    status_code = 403
    code = "forbidden"
    default_message = "Forbidden"


class DataAccessFailure(LibraryError):
    status_code = 500
    code = "internal_error"
    default_message = "internal server error"


def _internal_error_response():
    body = {"success": False, "code": DataAccessFailure.code, "message": DataAccessFailure.default_message}
    return jsonify(body), 500


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def handle_library_error(exc: LibraryError):
        if isinstance(exc, DataAccessFailure):
            current_app.logger.error(f"[errors] data access failure: {exc.message}", exc_info=exc.__cause__ or exc)
            db.session.rollback()
            return _internal_error_response()

        current_app.logger.warning(f"[errors] {exc.code}: {exc.message}")
        return jsonify(exc.to_response()), exc.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        if exc.code is not None and exc.code >= 500:
            current_app.logger.error(f"[errors] http {exc.code}: {exc.description}")
            return _internal_error_response()
        body = {"success": False, "code": exc.name.lower().replace(" ", "_"), "message": exc.description}
        return jsonify(body), exc.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(exc: Exception):
        # detaylar sadece logda kalır
        current_app.logger.exception(f"[errors] unhandled exception: {exc}")
        db.session.rollback()
        return _internal_error_response()
