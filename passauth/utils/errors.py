# passauth/utils/errors.py
"""API error taxonomy and the response envelope shared by every endpoint"""
from flask import jsonify


class ApiError(Exception):
    """Error carrying an HTTP status code and a caller-safe message"""
    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {
            'statusCode': self.status_code,
            'message': self.message,
            'success': False
        }


class InvalidInput(ApiError):
    """Missing or malformed request field"""
    status_code = 400
    default_message = 'Invalid input.'


class Unauthorized(ApiError):
    status_code = 401
    default_message = 'Invalid login credentials.'


class NotFound(ApiError):
    status_code = 404
    default_message = 'Resource not found.'


class Conflict(ApiError):
    status_code = 409
    default_message = 'User already exists.'


class InvalidOrExpired(ApiError):
    """Reset token unknown, consumed or past its expiration"""
    status_code = 400
    default_message = 'Invalid or expired reset token.'


class InternalError(ApiError):
    """Store, session or notification failure"""
    status_code = 500


class NotificationError(InternalError):
    default_message = 'Failed to send email.'


def api_response(status_code, data=None, message='Success'):
    """
    Build the JSON envelope used for every outcome

    Args:
        status_code: HTTP status code, >= 400 marks a failure
        data: Payload, an empty object when omitted
        message: Human readable outcome

    Returns:
        (response, status_code) tuple accepted by Flask views
    """
    body = {
        'statusCode': status_code,
        'data': data if data is not None else {},
        'message': message,
        'success': status_code < 400
    }
    return jsonify(body), status_code
