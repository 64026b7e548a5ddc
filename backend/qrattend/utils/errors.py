"""Domain errors raised by services and rendered by the app error handler."""
from typing import Any, Dict, Optional

class AttendanceError(Exception):
    """Base class for expected, user-facing failures."""
    
    status_code = 400
    code = 'error'
    
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
    
    def payload(self) -> Dict[str, Any]:
        """Extra fields merged into the error response."""
        return {}

class InvalidInputError(AttendanceError):
    """Missing or malformed request data."""
    code = 'invalid_input'

class NotFoundError(AttendanceError):
    """Unknown scan code, period, record or user."""
    status_code = 404
    code = 'not_found'

class ExpiredCodeError(AttendanceError):
    """Scan code past its expiry instant."""
    code = 'expired'
    
    def __init__(self, message: str = 'QR code has expired, ask your teacher to generate a new one'):
        super().__init__(message)

class AlreadyRecordedError(AttendanceError):
    """Second scan for the same student, period and date."""
    code = 'already_recorded'
    
    def __init__(self, record, message: str = 'Already scanned for this period today'):
        super().__init__(message)
        self.record = record
    
    def payload(self) -> Dict[str, Any]:
        return {'attendance': self.record.to_dict()}

class PermissionDeniedError(AttendanceError):
    """Caller lacks the capability or ownership for the action."""
    status_code = 403
    code = 'forbidden'

class ConflictError(AttendanceError):
    """Action blocked by rows that still reference the target."""
    status_code = 409
    code = 'conflict'

class AuthenticationFailedError(AttendanceError):
    """Wrong email or password."""
    status_code = 401
    code = 'unauthorized'
