"""Attendance API: scanning, review and listing."""
from flask import Blueprint, current_app, request
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError
from qrattend import db, limiter
from qrattend.models.user import Capability
from qrattend.services.attendance_service import AttendanceService
from qrattend.utils.decorators import capability_required, load_current_user
from qrattend.utils.errors import InvalidInputError
from qrattend.utils.helpers import error_response, json_body, success_response
from qrattend.utils.validators import Validator

attendance_bp = Blueprint('attendance', __name__)

STATUS_MESSAGES = {
    'on_time': "Attendance recorded: on time",
    'late': "Attendance recorded: late",
    'absent': "Attendance recorded: outside the class window",
    'pending_review': "Attendance recorded: location needs review by your teacher",
}

@attendance_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')

@attendance_bp.route('/scan', methods=['POST'])
@jwt_required()
@capability_required(Capability.SCAN_ATTENDANCE)
@limiter.limit("30 per minute")
def scan():
    """Submit a scanned code with an optional location reading."""
    data = json_body()
    
    try:
        result = AttendanceService.submit_scan(
            load_current_user().id,
            data.get('qr_code'),
            latitude=data.get('latitude'),
            longitude=data.get('longitude'),
            accuracy=data.get('accuracy')
        )
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Storage failure while recording scan")
        return error_response("Internal server error", 500)
    
    return success_response(
        data=result,
        message=STATUS_MESSAGES[result['status']],
        status_code=201
    )

@attendance_bp.route('/<int:record_id>/review', methods=['PATCH'])
@jwt_required()
@capability_required(Capability.REVIEW_ATTENDANCE)
def review(record_id):
    """Manually set a record's status."""
    data = json_body()
    if not data.get('status'):
        raise InvalidInputError("status is required")
    
    record = AttendanceService.resolve(record_id, data['status'], reviewer_id=load_current_user().id)
    return success_response(data={'attendance': record.to_dict()}, message="Attendance updated")

@attendance_bp.route('', methods=['GET'])
@jwt_required()
@capability_required(Capability.VIEW_ATTENDANCE)
def list_attendance():
    """List records with optional ``date``, ``period_id`` and ``status`` filters."""
    record_date = request.args.get('date')
    records = AttendanceService.list_records(
        record_date=Validator.parse_date(record_date) if record_date else None,
        period_id=request.args.get('period_id', type=int),
        status=request.args.get('status')
    )
    
    return success_response(data={
        'attendance': [_with_names(r) for r in records],
        'count': len(records)
    })

@attendance_bp.route('/mine', methods=['GET'])
@jwt_required()
@capability_required(Capability.SCAN_ATTENDANCE)
def my_attendance():
    """The calling student's records."""
    records = AttendanceService.list_records(
        student_id=load_current_user().id,
        limit=current_app.config.get('DEFAULT_PAGE_SIZE', 50)
    )
    return success_response(data={
        'attendance': [_with_names(r) for r in records],
        'count': len(records)
    })

def _with_names(record) -> dict:
    data = record.to_dict()
    data['student_name'] = record.student.name if record.student else None
    data['period_name'] = record.period.name if record.period else None
    return data
