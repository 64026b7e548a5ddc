"""Attendance record model with location verification details."""
from enum import Enum
from typing import Optional
from qrattend import db
from qrattend.models.base import BaseModel
from qrattend.utils.helpers import utcnow

MICRODEGREES_PER_DEGREE = 1_000_000

class AttendanceStatus(Enum):
    """Final classification of a scan."""
    ON_TIME = 'on_time'
    LATE = 'late'
    ABSENT = 'absent'
    PENDING_REVIEW = 'pending_review'

class LocationStatus(Enum):
    """Outcome of the location checks."""
    VERIFIED = 'verified'
    PENDING_REVIEW = 'pending_review'

def to_microdegrees(degrees: Optional[float]) -> Optional[int]:
    """Store a coordinate as an integer count of microdegrees."""
    if degrees is None:
        return None
    return int(round(degrees * MICRODEGREES_PER_DEGREE))

def from_microdegrees(micro: Optional[int]) -> Optional[float]:
    if micro is None:
        return None
    return micro / MICRODEGREES_PER_DEGREE

class AttendanceRecord(BaseModel):
    """Attendance record model."""
    
    __tablename__ = 'attendance_records'
    __table_args__ = (
        db.UniqueConstraint(
            'student_id', 'period_id', 'date',
            name='uq_attendance_student_period_date'
        ),
    )
    
    student_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    period_id = db.Column(db.Integer, db.ForeignKey('periods.id'), nullable=False, index=True)
    scan_token_id = db.Column(db.Integer, db.ForeignKey('scan_tokens.id'), nullable=True)
    
    date = db.Column(db.Date, nullable=False)
    scanned_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    status = db.Column(db.Enum(AttendanceStatus), nullable=False)
    
    # Raw location reading
    latitude = db.Column(db.Integer, nullable=True)  # microdegrees
    longitude = db.Column(db.Integer, nullable=True)  # microdegrees
    accuracy = db.Column(db.Integer, nullable=True)  # meters
    location_status = db.Column(db.Enum(LocationStatus), nullable=True)
    
    # Manual review
    reviewed_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    reviewed_at = db.Column(db.DateTime, nullable=True)
    
    @property
    def latitude_degrees(self) -> Optional[float]:
        return from_microdegrees(self.latitude)
    
    @property
    def longitude_degrees(self) -> Optional[float]:
        return from_microdegrees(self.longitude)
    
    def to_dict(self, exclude: list = None) -> dict:
        data = super().to_dict(exclude=exclude)
        data['location'] = None
        if any(value is not None for value in (self.latitude, self.longitude, self.accuracy)):
            data['location'] = {
                'latitude': self.latitude_degrees,
                'longitude': self.longitude_degrees,
                'accuracy': self.accuracy
            }
        return data
    
    def __repr__(self):
        return f'<AttendanceRecord {self.student_id}-{self.period_id} {self.date}>'
