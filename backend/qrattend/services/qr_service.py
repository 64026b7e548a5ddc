"""QR code issuance and lookup service."""
import base64
import io
import secrets
from datetime import date, datetime, timedelta
from typing import Optional

import qrcode
from flask import current_app

from qrattend import db
from qrattend.models.period import Period
from qrattend.models.scan_token import ScanToken
from qrattend.utils.errors import InvalidInputError, NotFoundError
from qrattend.utils.helpers import utcnow

class QRService:
    """Service for scan token operations."""

    @staticmethod
    def generate_code() -> str:
        """Generate an unguessable opaque code."""
        return secrets.token_urlsafe(24)

    @staticmethod
    def clamp_ttl(minutes) -> int:
        """Clamp a requested lifetime into the configured bounds."""
        default = current_app.config.get('QR_CODE_DEFAULT_TTL_MINUTES', 60)
        maximum = current_app.config.get('QR_CODE_MAX_TTL_MINUTES', 24 * 60)
        if minutes is None:
            return default
        try:
            minutes = int(minutes)
        except (TypeError, ValueError):
            raise InvalidInputError("expires_in_minutes must be an integer")
        return max(1, min(minutes, maximum))

    @staticmethod
    def issue(period_id: int, token_date: date, ttl_minutes: int,
              created_by: Optional[int] = None, now: Optional[datetime] = None) -> ScanToken:
        """Create and store a scan token for a period and date."""
        period = db.session.get(Period, period_id)
        if not period:
            raise NotFoundError("Period not found")

        now = now or utcnow()
        token = ScanToken(
            code=QRService.generate_code(),
            period_id=period.id,
            date=token_date,
            expires_at=now + timedelta(minutes=ttl_minutes),
            created_by=created_by,
            created_at=now
        )
        db.session.add(token)
        db.session.commit()

        current_app.logger.info(
            "Issued scan token %s for period %s on %s (expires %s)",
            token.id, period.id, token_date.isoformat(), token.expires_at.isoformat()
        )
        return token

    @staticmethod
    def resolve(code: str) -> ScanToken:
        """Look up a token by code. Expiry is left to the caller."""
        token = ScanToken.query.filter_by(code=code).first()
        if not token:
            raise NotFoundError("Invalid QR code")
        return token

    @staticmethod
    def is_expired(token: ScanToken, now: Optional[datetime] = None) -> bool:
        return token.is_expired(now or utcnow())

    @staticmethod
    def render_image(code: str) -> str:
        """Render a code as a PNG data URL."""
        qr = qrcode.QRCode(
            version=None,  # Auto-determine size
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=4,
        )
        qr.add_data(code)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        img_str = base64.b64encode(buffered.getvalue()).decode()

        return f"data:image/png;base64,{img_str}"

    @staticmethod
    def to_dict(token: ScanToken, now: Optional[datetime] = None) -> dict:
        data = token.to_dict()
        data['is_expired'] = QRService.is_expired(token, now)
        return data
