"""Period management API."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from qrattend.models.user import Capability
from qrattend.services.period_service import PeriodService
from qrattend.utils.decorators import authenticated_user_required, load_current_user
from qrattend.utils.errors import PermissionDeniedError
from qrattend.utils.helpers import success_response

periods_bp = Blueprint('periods', __name__)

def _require_period_manager():
    user = load_current_user()
    if not (user.has_capability(Capability.MANAGE_OWN_PERIODS) or
            user.has_capability(Capability.MANAGE_ALL_PERIODS)):
        raise PermissionDeniedError("Period management access required")
    return user

@periods_bp.route('', methods=['GET'])
@jwt_required()
@authenticated_user_required
def list_periods():
    """List periods. ``?mine=1`` restricts to the caller's own."""
    teacher_id = None
    if request.args.get('mine') in ('1', 'true'):
        teacher_id = load_current_user().id
    
    periods = PeriodService.list_periods(teacher_id=teacher_id)
    return success_response(data={'periods': [p.to_dict() for p in periods]})

@periods_bp.route('/<int:period_id>', methods=['GET'])
@jwt_required()
@authenticated_user_required
def get_period(period_id):
    period = PeriodService.get_period(period_id)
    return success_response(data={'period': period.to_dict()})

@periods_bp.route('', methods=['POST'])
@jwt_required()
@authenticated_user_required
def create_period():
    """Create a period."""
    user = _require_period_manager()
    period = PeriodService.create_period(request.get_json(silent=True), user)
    return success_response(
        data={'period': period.to_dict()},
        message="Period created successfully",
        status_code=201
    )

@periods_bp.route('/<int:period_id>', methods=['PATCH'])
@jwt_required()
@authenticated_user_required
def update_period(period_id):
    """Update a period owned by the caller (or any, for administrators)."""
    user = _require_period_manager()
    period = PeriodService.update_period(period_id, request.get_json(silent=True), user)
    return success_response(data={'period': period.to_dict()}, message="Period updated successfully")

@periods_bp.route('/<int:period_id>', methods=['DELETE'])
@jwt_required()
@authenticated_user_required
def delete_period(period_id):
    """Delete a period."""
    user = _require_period_manager()
    PeriodService.delete_period(period_id, user)
    return success_response(message="Period deleted successfully")
