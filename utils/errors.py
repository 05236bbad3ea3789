# utils/errors.py
import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    message = "Unexpected error"

    def __init__(self, message: str | None = None, errors: list | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.errors = errors

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class ValidationError(AppError):
    status_code = 400
    message = "Invalid data"


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class Forbidden(AppError):
    status_code = 403
    message = "Access denied"


class Conflict(AppError):
    status_code = 400
    message = "Operation not allowed in the current state"


class AlreadySigned(Conflict):
    message = "Requisition already signed"


class Unauthenticated(AppError):
    status_code = 401
    message = "Not authenticated"


def register_error_handlers(app):
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        logger.exception("Unhandled error")
        return jsonify({"message": "Internal server error"}), 500
