"""Super administrator API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from qrattend.models.user import Capability
from qrattend.services.user_service import UserService
from qrattend.utils.decorators import capability_required, load_current_user
from qrattend.utils.helpers import success_response

admin_bp = Blueprint('admin', __name__)

@admin_bp.route('/stats', methods=['GET'])
@jwt_required()
@capability_required(Capability.MANAGE_USERS)
def stats():
    """System-wide totals."""
    return success_response(data=UserService.statistics())

@admin_bp.route('/users', methods=['GET'])
@jwt_required()
@capability_required(Capability.MANAGE_USERS)
def list_users():
    users = UserService.list_users(role=request.args.get('role'))
    return success_response(data={'users': [u.to_dict() for u in users]})

@admin_bp.route('/users', methods=['POST'])
@jwt_required()
@capability_required(Capability.MANAGE_USERS)
def create_user():
    user = UserService.create_user(request.get_json(silent=True))
    return success_response(data={'user': user.to_dict()}, message="User created", status_code=201)

@admin_bp.route('/users/<int:user_id>', methods=['DELETE'])
@jwt_required()
@capability_required(Capability.MANAGE_USERS)
def delete_user(user_id):
    UserService.delete_user(user_id, load_current_user().id)
    return success_response(message="User deleted")
