"""Helper functions for the application."""
from datetime import date, datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo

from flask import current_app, jsonify, request

from qrattend.utils.errors import InvalidInputError

def handle_error(error, status_code: int):
    """Handle application errors with consistent format."""
    return jsonify({
        'error': True,
        'message': str(error),
        'status_code': status_code
    }), status_code

def success_response(data: Any = None, message: str = "Success", status_code: int = 200):
    """Return consistent success response."""
    response = {
        'error': False,
        'message': message
    }
    
    if data is not None:
        response['data'] = data
    
    return jsonify(response), status_code

def error_response(message: str, status_code: int = 400, **extra):
    """Return consistent error response."""
    body = {
        'error': True,
        'message': message,
        'status_code': status_code
    }
    body.update(extra)
    return jsonify(body), status_code

def utcnow() -> datetime:
    """Current instant as a naive UTC datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def institution_tz() -> ZoneInfo:
    """The institution's civil timezone."""
    return ZoneInfo(current_app.config.get('INSTITUTION_TIMEZONE', 'UTC'))

def to_institution_time(instant: datetime) -> datetime:
    """Convert a naive UTC instant to wall-clock time at the institution."""
    return instant.replace(tzinfo=timezone.utc).astimezone(institution_tz())

def institution_today(instant: datetime = None) -> date:
    """Calendar date at the institution for the given (or current) instant."""
    return to_institution_time(instant or utcnow()).date()

def isoformat_utc(instant: datetime) -> str:
    """Serialize a naive UTC datetime with an explicit offset."""
    if instant is None:
        return None
    return instant.replace(tzinfo=timezone.utc).isoformat()

def json_body() -> dict:
    """The request's JSON object; a missing or unparsable body reads as empty."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data
