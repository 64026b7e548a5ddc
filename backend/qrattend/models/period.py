"""Period model: a scheduled class slot."""
from qrattend import db
from qrattend.models.base import BaseModel

class Period(BaseModel):
    """A recurring class time slot that attendance is tracked against."""
    
    __tablename__ = 'periods'
    
    name = db.Column(db.String(255), nullable=False)
    strand = db.Column(db.String(100), nullable=True)
    section = db.Column(db.String(100), nullable=True)
    subject = db.Column(db.String(255), nullable=True)
    
    # Null for legacy or shared periods
    teacher_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    
    # Civil HH:MM in the institution timezone
    start_time = db.Column(db.String(5), nullable=False)
    end_time = db.Column(db.String(5), nullable=False)
    late_threshold = db.Column(db.Integer, nullable=False, default=15)  # minutes after start
    
    # Relationships
    scan_tokens = db.relationship('ScanToken', backref='period', lazy='dynamic')
    attendance_records = db.relationship('AttendanceRecord', backref='period', lazy='dynamic')
    
    def is_owned_by(self, user_id: int) -> bool:
        return self.teacher_id is not None and self.teacher_id == user_id
    
    def __repr__(self):
        return f'<Period {self.name} {self.start_time}-{self.end_time}>'
