"""Validation utilities for the application."""
import math
import re
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from qrattend.utils.errors import InvalidInputError

TIME_OF_DAY_PATTERN = re.compile(r'^([01]?\d|2[0-3]):([0-5]\d)$')
EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

class Validator:
    """Validation helper class."""
    
    @staticmethod
    def validate_email(email: str) -> bool:
        """Validate email format."""
        if not isinstance(email, str) or not email:
            return False
        return bool(EMAIL_PATTERN.match(email))
    
    @staticmethod
    def validate_password(password: str) -> Dict[str, Any]:
        """Validate password strength."""
        errors = []
        
        if not password or not isinstance(password, str):
            errors.append("Password is required")
        elif len(password) < 6:
            errors.append("Password must be at least 6 characters long")
        elif len(password) > 128:
            errors.append("Password is too long")
        
        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }
    
    @staticmethod
    def validate_name(name: str) -> Dict[str, Any]:
        """Validate user name."""
        errors = []
        
        if not isinstance(name, str) or not name.strip():
            errors.append("Name is required")
        elif len(name.strip()) < 2:
            errors.append("Name must be at least 2 characters long")
        elif len(name.strip()) > 100:
            errors.append("Name is too long")
        
        return {
            "is_valid": len(errors) == 0,
            "errors": errors
        }
    
    @staticmethod
    def require_fields(data: Optional[Dict], required_fields: List[str]) -> Dict:
        """Raise InvalidInputError unless every field is present and non-empty."""
        if not isinstance(data, dict):
            raise InvalidInputError("Request body must be JSON")
        
        missing = [field for field in required_fields
                   if data.get(field) is None or data.get(field) == '']
        if missing:
            raise InvalidInputError(f"Missing required field(s): {', '.join(missing)}")
        return data
    
    @staticmethod
    def parse_time_of_day(value: str, field: str) -> str:
        """Normalize an HH:MM string, raising on malformed input."""
        match = TIME_OF_DAY_PATTERN.match(str(value).strip()) if value is not None else None
        if not match:
            raise InvalidInputError(f"{field} must be in HH:MM format")
        return f"{int(match.group(1)):02d}:{match.group(2)}"
    
    @staticmethod
    def parse_non_negative_int(value: Any, field: str) -> int:
        """Parse a non-negative integer."""
        if isinstance(value, bool):
            raise InvalidInputError(f"{field} must be a non-negative integer")
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise InvalidInputError(f"{field} must be a non-negative integer")
        if number < 0 or (isinstance(value, float) and not value.is_integer()):
            raise InvalidInputError(f"{field} must be a non-negative integer")
        return number
    
    @staticmethod
    def parse_date(value: str, field: str = 'date') -> date:
        """Parse a YYYY-MM-DD calendar date."""
        try:
            return date.fromisoformat(str(value))
        except ValueError:
            raise InvalidInputError(f"{field} must be in YYYY-MM-DD format")
    
    @staticmethod
    def parse_optional_float(value: Any, field: str,
                             bounds: Optional[Tuple[float, float]] = None) -> Optional[float]:
        """Parse an optional finite number within bounds; None stays None."""
        if value is None:
            return None
        if isinstance(value, bool):
            raise InvalidInputError(f"{field} must be a number")
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise InvalidInputError(f"{field} must be a number")
        if not math.isfinite(number):
            raise InvalidInputError(f"{field} must be a finite number")
        if bounds is not None and not bounds[0] <= number <= bounds[1]:
            raise InvalidInputError(f"{field} must be between {bounds[0]:g} and {bounds[1]:g}")
        return number
