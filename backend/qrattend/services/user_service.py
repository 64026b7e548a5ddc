"""User administration and statistics."""
from typing import Dict, List, Optional

from flask import current_app

from qrattend import db
from qrattend.models.attendance import AttendanceRecord, AttendanceStatus, LocationStatus
from qrattend.models.period import Period
from qrattend.models.scan_token import ScanToken
from qrattend.models.user import User, UserRole
from qrattend.services.auth_service import AuthService
from qrattend.utils.errors import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError

PROMOTABLE_ROLES = (UserRole.STUDENT, UserRole.SECRETARY)

class UserService:
    """Service for managing accounts."""

    @staticmethod
    def list_users(role: Optional[str] = None) -> List[User]:
        query = User.query
        if role:
            try:
                query = query.filter(User.role == UserRole(role))
            except ValueError:
                raise InvalidInputError("Invalid role")
        return query.order_by(User.name).all()

    @staticmethod
    def create_user(data: Dict) -> User:
        """Administrator account creation; any role is allowed."""
        if not isinstance(data, dict):
            raise InvalidInputError("Request body must be JSON")
        return AuthService.register(
            data.get('email'), data.get('password'), data.get('name'), data.get('role'),
            student_lrn=data.get('student_lrn'),
            allowed_roles=None
        )

    @staticmethod
    def delete_user(user_id: int, actor_id: int) -> None:
        """Delete an account that has no attendance records."""
        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.id == actor_id:
            raise ConflictError("Cannot delete your own account")

        if AttendanceRecord.query.filter_by(student_id=user.id).first():
            raise ConflictError("Cannot delete user with attendance records")

        # Owned periods become shared periods
        Period.query.filter_by(teacher_id=user.id).update({'teacher_id': None})
        ScanToken.query.filter_by(created_by=user.id).update({'created_by': None})
        AttendanceRecord.query.filter_by(reviewed_by=user.id).update({'reviewed_by': None})
        db.session.delete(user)
        db.session.commit()
        current_app.logger.info("User %s deleted by %s", user_id, actor_id)

    @staticmethod
    def change_student_role(teacher_id: int, student_id: int, role: str) -> User:
        """Toggle a student between student and secretary.

        The teacher must own a period the student has attended.
        """
        try:
            new_role = UserRole(role)
        except ValueError:
            raise InvalidInputError("Invalid role")
        if new_role not in PROMOTABLE_ROLES:
            raise InvalidInputError("Invalid role")

        student = db.session.get(User, student_id)
        if not student or student.role not in PROMOTABLE_ROLES:
            raise NotFoundError("Student not found")

        attended = AttendanceRecord.query.join(Period).filter(
            AttendanceRecord.student_id == student.id,
            Period.teacher_id == teacher_id
        ).first()
        if not attended:
            raise PermissionDeniedError("Student not found in your classes")

        student.role = new_role
        db.session.commit()
        return student

    @staticmethod
    def statistics() -> Dict[str, int]:
        return {
            'total_users': User.query.count(),
            'total_students': User.query.filter_by(role=UserRole.STUDENT).count(),
            'total_teachers': User.query.filter_by(role=UserRole.TEACHER).count(),
            'total_periods': Period.query.count(),
            'total_attendance': AttendanceRecord.query.count(),
            'total_qr_codes': ScanToken.query.count(),
            'pending_review': AttendanceRecord.query.filter(
                (AttendanceRecord.status == AttendanceStatus.PENDING_REVIEW) |
                (AttendanceRecord.location_status == LocationStatus.PENDING_REVIEW)
            ).count(),
            'verified': AttendanceRecord.query.filter_by(location_status=LocationStatus.VERIFIED).count(),
        }
