"""User model for authentication and authorization."""
from enum import Enum
from werkzeug.security import generate_password_hash, check_password_hash
from qrattend import db
from qrattend.models.base import BaseModel

class UserRole(Enum):
    """User roles enumeration."""
    STUDENT = 'student'
    TEACHER = 'teacher'
    SECRETARY = 'secretary'
    SUPER_ADMIN = 'super_admin'

class Capability(Enum):
    """Actions an endpoint can require of its caller."""
    SCAN_ATTENDANCE = 'scan_attendance'
    ISSUE_QR = 'issue_qr'
    MANAGE_OWN_PERIODS = 'manage_own_periods'
    MANAGE_ALL_PERIODS = 'manage_all_periods'
    VIEW_ATTENDANCE = 'view_attendance'
    REVIEW_ATTENDANCE = 'review_attendance'
    MANAGE_USERS = 'manage_users'
    PROMOTE_STUDENTS = 'promote_students'

ROLE_CAPABILITIES = {
    UserRole.STUDENT: frozenset({
        Capability.SCAN_ATTENDANCE,
    }),
    UserRole.TEACHER: frozenset({
        Capability.ISSUE_QR,
        Capability.MANAGE_OWN_PERIODS,
        Capability.VIEW_ATTENDANCE,
        Capability.REVIEW_ATTENDANCE,
        Capability.PROMOTE_STUDENTS,
    }),
    UserRole.SECRETARY: frozenset({
        Capability.ISSUE_QR,
        Capability.MANAGE_ALL_PERIODS,
        Capability.VIEW_ATTENDANCE,
        Capability.REVIEW_ATTENDANCE,
    }),
    UserRole.SUPER_ADMIN: frozenset({
        Capability.ISSUE_QR,
        Capability.MANAGE_ALL_PERIODS,
        Capability.VIEW_ATTENDANCE,
        Capability.REVIEW_ATTENDANCE,
        Capability.MANAGE_USERS,
    }),
}

class User(BaseModel):
    """User model for all system users."""
    
    __tablename__ = 'users'
    
    # Basic Information
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    student_lrn = db.Column(db.String(50), nullable=True)
    
    # Role
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.STUDENT)
    
    # Relationships
    periods = db.relationship('Period', backref='teacher', lazy='dynamic')
    attendance_records = db.relationship(
        'AttendanceRecord', backref='student', lazy='dynamic',
        foreign_keys='AttendanceRecord.student_id'
    )
    
    def set_password(self, password: str) -> None:
        """Set user password with hashing."""
        self.password_hash = generate_password_hash(password)
    
    def check_password(self, password: str) -> bool:
        """Check if provided password matches user's password."""
        return check_password_hash(self.password_hash, password)
    
    @property
    def capabilities(self) -> frozenset:
        return ROLE_CAPABILITIES.get(self.role, frozenset())
    
    def has_capability(self, capability: Capability) -> bool:
        """Check whether the user's role grants a capability."""
        return capability in self.capabilities
    
    def to_dict(self, exclude: list = None) -> dict:
        """Convert to dictionary excluding sensitive data."""
        default_exclude = ['password_hash']
        exclude = (exclude or []) + default_exclude
        
        return super().to_dict(exclude=exclude)
    
    def __repr__(self) -> str:
        return f'<User {self.email}>'
