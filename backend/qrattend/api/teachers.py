"""Teacher-facing student management."""
from flask import Blueprint
from flask_jwt_extended import jwt_required
from qrattend.models.user import Capability
from qrattend.services.user_service import UserService
from qrattend.utils.decorators import capability_required, load_current_user
from qrattend.utils.errors import InvalidInputError
from qrattend.utils.helpers import json_body, success_response

teachers_bp = Blueprint('teachers', __name__)

@teachers_bp.route('/students/<int:student_id>/role', methods=['PATCH'])
@jwt_required()
@capability_required(Capability.PROMOTE_STUDENTS)
def change_student_role(student_id):
    """Promote a student to secretary, or demote back."""
    data = json_body()
    if not data.get('role'):
        raise InvalidInputError("role is required")
    
    student = UserService.change_student_role(load_current_user().id, student_id, data['role'])
    return success_response(data={'user': student.to_dict()}, message="Role updated")
