"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole, Capability
from .period import Period
from .scan_token import ScanToken
from .attendance import AttendanceRecord, AttendanceStatus, LocationStatus

__all__ = [
    'BaseModel', 'User', 'UserRole', 'Capability',
    'Period', 'ScanToken',
    'AttendanceRecord', 'AttendanceStatus', 'LocationStatus'
]
