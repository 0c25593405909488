"""
API error types and their JSON rendering.

Services raise these; the handlers registered in create_app turn them into
responses shaped as {"error": ..., "reason": ...}.
"""
from flask import jsonify, current_app
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException

from campus_partners.extensions import db


class ApiError(Exception):
    status_code = 500
    reason = 'internal_error'
    message = 'Internal server error'

    def __init__(self, message=None, reason=None, details=None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.reason = reason or self.reason
        self.details = details

    def to_dict(self):
        body = {"error": self.message, "reason": self.reason}
        if self.details is not None:
            body["details"] = self.details
        return body


class InvalidRequestError(ApiError):
    status_code = 400
    reason = 'validation_failed'
    message = 'Validation failed'


class AuthenticationError(ApiError):
    status_code = 401
    reason = 'unauthenticated'
    message = 'Access token required'


class AuthorizationError(ApiError):
    status_code = 403
    reason = 'forbidden'
    message = 'Access forbidden'


class NotFoundError(ApiError):
    status_code = 404
    reason = 'not_found'
    message = 'Resource not found'


class ConflictError(ApiError):
    status_code = 409
    reason = 'conflict'
    message = 'Request conflicts with current state'


def error_response(message, reason, status_code, details=None):
    body = {"error": message, "reason": reason}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err):
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(err):
        return error_response("Validation failed", "validation_failed", 400, err.messages)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        reason = (err.name or 'error').lower().replace(' ', '_')
        return error_response(err.description, reason, err.code)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err):
        current_app.logger.exception(f"Unhandled error: {err}")
        db.session.rollback()
        return error_response("Internal server error", "internal_error", 500)
