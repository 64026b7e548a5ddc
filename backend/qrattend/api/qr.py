"""QR Code API endpoints."""
from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from qrattend import limiter
from qrattend.models.scan_token import ScanToken
from qrattend.models.user import Capability
from qrattend.services.qr_service import QRService
from qrattend.utils.decorators import capability_required, load_current_user
from qrattend.utils.errors import InvalidInputError
from qrattend.utils.helpers import institution_today, json_body, success_response, utcnow
from qrattend.utils.validators import Validator

qr_bp = Blueprint('qr', __name__)

@qr_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='QR service is running')

@qr_bp.route('/generate', methods=['POST'])
@jwt_required()
@capability_required(Capability.ISSUE_QR)
@limiter.limit("60 per hour")
def generate_qr():
    """Issue a scan token for a period and render it."""
    data = json_body()
    
    if data.get('period_id') is None:
        raise InvalidInputError("period_id is required")
    period_id = Validator.parse_non_negative_int(data['period_id'], 'period_id')
    
    token_date = Validator.parse_date(data['date']) if data.get('date') else institution_today()
    ttl_minutes = QRService.clamp_ttl(data.get('expires_in_minutes'))
    
    token = QRService.issue(period_id, token_date, ttl_minutes, created_by=load_current_user().id)
    
    return success_response(
        data={
            'qr_code': token.code,
            'qr_image': QRService.render_image(token.code),
            'expires_at': QRService.to_dict(token)['expires_at'],
            'expires_in_minutes': ttl_minutes,
            'token': QRService.to_dict(token),
            'period': token.period.to_dict()
        },
        message="QR code generated successfully",
        status_code=201
    )

@qr_bp.route('/codes', methods=['GET'])
@jwt_required()
@capability_required(Capability.ISSUE_QR)
def list_codes():
    """List issued codes, newest first."""
    query = ScanToken.query
    period_id = request.args.get('period_id', type=int)
    if period_id:
        query = query.filter_by(period_id=period_id)
    
    now = utcnow()
    tokens = query.order_by(ScanToken.created_at.desc()).all()
    return success_response(data={'codes': [QRService.to_dict(t, now) for t in tokens]})
