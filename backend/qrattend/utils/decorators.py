"""Custom decorators for authorization."""
from functools import wraps
from flask_jwt_extended import get_jwt_identity
from qrattend import db
from qrattend.models.user import User
from qrattend.utils.helpers import error_response

def load_current_user() -> User:
    """Resolve the JWT identity to a user row."""
    try:
        user_id = int(get_jwt_identity())
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)

def capability_required(*capabilities):
    """Decorator to require every listed capability. Use after ``jwt_required``."""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = load_current_user()
            
            if not user:
                return error_response("User not found", 404)
            
            missing = [c for c in capabilities if not user.has_capability(c)]
            if missing:
                return error_response(
                    f"Missing capability: {', '.join(c.value for c in missing)}", 403
                )
            
            return f(*args, **kwargs)
        return decorated_function
    return decorator

def authenticated_user_required(f):
    """Decorator to require that the token still maps to a user."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not load_current_user():
            return error_response("User not found", 404)
        return f(*args, **kwargs)
    return decorated_function
