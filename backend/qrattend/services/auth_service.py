"""Authentication service for user management."""
from typing import Iterable, Optional

from flask_jwt_extended import create_access_token

from qrattend import db
from qrattend.models.user import User, UserRole
from qrattend.utils.errors import AuthenticationFailedError, InvalidInputError, NotFoundError
from qrattend.utils.validators import Validator

SELF_REGISTER_ROLES = (UserRole.STUDENT, UserRole.TEACHER)

class AuthService:

    @staticmethod
    def issue_token(user: User) -> str:
        """Access token whose identity is the user id and whose claims carry the role."""
        return create_access_token(
            identity=str(user.id),
            additional_claims={'role': user.role.value}
        )

    @staticmethod
    def login(email: str, password: str) -> dict:
        """Authenticate user and return a token."""
        if not email or not password:
            raise InvalidInputError("Email and password are required")

        user = User.query.filter_by(email=email.lower().strip()).first()
        if not user or not user.check_password(password):
            raise AuthenticationFailedError("Invalid credentials")

        return {
            "access_token": AuthService.issue_token(user),
            "user": user.to_dict()
        }

    @staticmethod
    def register(email: str, password: str, name: str, role: str,
                 student_lrn: Optional[str] = None,
                 allowed_roles: Optional[Iterable[UserRole]] = SELF_REGISTER_ROLES) -> User:
        """Register new user. ``allowed_roles=None`` permits any role."""
        if not all([email, password, name, role]):
            raise InvalidInputError("Email, password, name and role are required")

        if not Validator.validate_email(email):
            raise InvalidInputError("Invalid email format")

        password_check = Validator.validate_password(password)
        if not password_check['is_valid']:
            raise InvalidInputError(password_check['errors'][0])

        name_check = Validator.validate_name(name)
        if not name_check['is_valid']:
            raise InvalidInputError(name_check['errors'][0])

        try:
            user_role = UserRole(str(role).lower())
        except ValueError:
            raise InvalidInputError("Invalid role")
        if allowed_roles is not None and user_role not in allowed_roles:
            raise InvalidInputError("Invalid role")

        email = email.lower().strip()
        if User.query.filter_by(email=email).first():
            raise InvalidInputError("User already exists")

        user = User(
            email=email,
            name=name.strip(),
            role=user_role,
            student_lrn=student_lrn if user_role == UserRole.STUDENT else None
        )
        user.set_password(password)
        user.save()
        return user

    @staticmethod
    def change_password(user_id: int, current_password: str, new_password: str) -> None:
        if not current_password or not new_password:
            raise InvalidInputError("Missing fields")

        user = db.session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        if not user.check_password(current_password):
            raise InvalidInputError("Incorrect current password")

        password_check = Validator.validate_password(new_password)
        if not password_check['is_valid']:
            raise InvalidInputError(password_check['errors'][0])

        user.set_password(new_password)
        db.session.commit()

    @staticmethod
    def ensure_super_admin(email: str, password: str) -> bool:
        """Create the bootstrap super admin if missing. Returns True when created."""
        if User.query.filter_by(email=email.lower()).first():
            return False

        admin = User(email=email.lower(), name='Super Admin', role=UserRole.SUPER_ADMIN)
        admin.set_password(password)
        admin.save()
        return True
