import logging

from flask import jsonify
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class TaskboardError(Exception):
    pass


# ---------- core errors ----------
class HashFormatError(TaskboardError):
    pass


class StorageError(TaskboardError):
    pass


class StorageWriteError(StorageError):
    pass


class InvalidTokenError(TaskboardError):
    def __init__(self, message="Invalid or expired token"):
        super().__init__(message)


# ---------- errors that map to an HTTP response ----------
class APIError(TaskboardError):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class BadRequest(APIError):
    status_code = 400


class Unauthorized(APIError):
    status_code = 401


class Forbidden(APIError):
    status_code = 403


class NotFound(APIError):
    status_code = 404


class Conflict(APIError):
    status_code = 409


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def handle_api_error(e):
        return jsonify({"error": e.message}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        logger.exception("Unhandled error on request")
        return jsonify({"error": "Internal server error"}), 500
