"""Error taxonomy and the JSON envelope every API response uses.

Handlers raise the ``ApiError`` subclasses below; ``register_error_handlers``
translates them (plus validation, integrity and unexpected errors) into
``{success: false, error, message, details}`` responses.
"""

import json

from flask import current_app, jsonify
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from arcade import db


class ApiError(Exception):
    status_code = 500
    error_code = 'INTERNAL_ERROR'
    default_message = 'An unexpected error occurred'

    def __init__(self, message=None, error_code=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if error_code:
            self.error_code = error_code
        self.details = details


class ValidationFailed(ApiError):
    status_code = 400
    error_code = 'VALIDATION_ERROR'
    default_message = 'Invalid input data'


class Unauthorized(ApiError):
    status_code = 401
    error_code = 'UNAUTHORIZED'
    default_message = 'Unauthorized'


class Forbidden(ApiError):
    status_code = 403
    error_code = 'FORBIDDEN'
    default_message = 'Forbidden'


class NotFound(ApiError):
    status_code = 404
    error_code = 'NOT_FOUND'
    default_message = 'Resource not found'


class Conflict(ApiError):
    status_code = 409
    error_code = 'CONFLICT'
    default_message = 'Conflict'


class RateLimited(ApiError):
    status_code = 429
    error_code = 'RATE_LIMIT_EXCEEDED'
    default_message = 'Too many requests. Please try again later.'


def success(data=None, message=None, status=200):
    payload = {'success': True, 'data': data}
    if message:
        payload['message'] = message
    return jsonify(payload), status


def error_response(error_code, message, status, details=None):
    payload = {'success': False, 'error': error_code, 'message': message}
    if details is not None:
        payload['details'] = details
    return jsonify(payload), status


def _is_development():
    return current_app.debug or current_app.config.get('APP_ENV') == 'development'


def register_error_handlers(flask_app):

    @flask_app.errorhandler(ApiError)
    def handle_api_error(exc):
        db.session.rollback()
        return error_response(exc.error_code, exc.message, exc.status_code, exc.details)

    @flask_app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        db.session.rollback()
        details = json.loads(exc.json(include_url=False))
        return error_response('VALIDATION_ERROR', 'Invalid input data', 400, details)

    @flask_app.errorhandler(IntegrityError)
    def handle_integrity_error(exc):
        db.session.rollback()
        current_app.logger.warning(f"[conflict] unique constraint violated: {exc.orig}")
        return error_response('CONFLICT', 'Duplicate entry: this value already exists', 409)

    @flask_app.errorhandler(HTTPException)
    def handle_http_exception(exc):
        code = (exc.name or 'error').upper().replace(' ', '_')
        return error_response(code, exc.description or exc.name, exc.code or 500)

    @flask_app.errorhandler(Exception)
    def handle_unexpected_error(exc):
        db.session.rollback()
        current_app.logger.exception(f"[error] unhandled {type(exc).__name__}: {exc}")
        message = str(exc) if _is_development() else 'An unexpected error occurred'
        return error_response('INTERNAL_ERROR', message or 'An unexpected error occurred', 500)
