"""Authentication API."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from qrattend import limiter
from qrattend.services.auth_service import AuthService
from qrattend.utils.decorators import authenticated_user_required, load_current_user
from qrattend.utils.helpers import json_body, success_response

auth_bp = Blueprint("auth", __name__)

@auth_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint."""
    return success_response(message="Auth service is running")

@auth_bp.route("/register", methods=["POST"])
@limiter.limit("10 per hour")
def register():
    """Self-registration for students and teachers."""
    data = json_body()
    
    user = AuthService.register(
        data.get("email"),
        data.get("password"),
        data.get("name"),
        data.get("role"),
        student_lrn=data.get("student_lrn")
    )
    
    return success_response(
        data={
            "access_token": AuthService.issue_token(user),
            "user": user.to_dict()
        },
        message="Registration successful",
        status_code=201
    )

@auth_bp.route("/login", methods=["POST"])
@limiter.limit("5 per minute")
def login():
    """Email and password login."""
    data = json_body()
    
    result = AuthService.login(
        str(data.get("email") or "").strip(),
        str(data.get("password") or "")
    )
    
    return success_response(data=result, message="Login successful")

@auth_bp.route("/me", methods=["GET"])
@jwt_required()
@authenticated_user_required
def get_current_user():
    """Get current user profile."""
    user = load_current_user()
    data = user.to_dict()
    data['capabilities'] = sorted(c.value for c in user.capabilities)
    return success_response(data=data)

@auth_bp.route("/change-password", methods=["POST"])
@jwt_required()
@authenticated_user_required
def change_password():
    """Change the caller's password."""
    data = json_body()
    
    AuthService.change_password(
        load_current_user().id,
        data.get("current_password"),
        data.get("new_password")
    )
    
    return success_response(message="Password changed successfully")
