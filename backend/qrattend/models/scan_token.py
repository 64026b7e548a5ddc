"""Scan token (QR code) model."""
from datetime import datetime
from qrattend import db
from qrattend.models.base import BaseModel

class ScanToken(BaseModel):
    """Opaque QR credential bound to a period and a calendar date."""
    
    __tablename__ = 'scan_tokens'
    
    code = db.Column(db.String(64), unique=True, nullable=False, index=True)
    period_id = db.Column(db.Integer, db.ForeignKey('periods.id'), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    
    # Relationships
    attendance_records = db.relationship('AttendanceRecord', backref='scan_token', lazy='dynamic')
    
    def is_expired(self, now: datetime) -> bool:
        """Expired strictly after the expiry instant."""
        return now > self.expires_at
    
    def __repr__(self):
        return f'<ScanToken {self.code[:8]} period={self.period_id} {self.date}>'
