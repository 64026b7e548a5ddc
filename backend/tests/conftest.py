"""Shared fixtures for the attendance service tests."""
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from qrattend import create_app, db
from qrattend.models.period import Period
from qrattend.models.user import User, UserRole
from qrattend.services.auth_service import AuthService

SCAN_DAY = date(2026, 3, 2)
INSIDE_FENCE = {'latitude': 0.005, 'longitude': 0.005, 'accuracy': 10}
OUTSIDE_FENCE = {'latitude': 0.05, 'longitude': 0.05, 'accuracy': 10}

def manila(hour: int, minute: int, day: date = SCAN_DAY) -> datetime:
    """Naive UTC instant for a wall-clock time at the institution."""
    local = datetime(day.year, day.month, day.day, hour, minute, tzinfo=ZoneInfo('Asia/Manila'))
    return local.astimezone(timezone.utc).replace(tzinfo=None)

def make_user(email: str, role: UserRole, password: str = 'password123', name: str = 'Test User') -> User:
    user = User(email=email, name=name, role=role)
    user.set_password(password)
    return user.save()

def auth_headers(user: User) -> dict:
    return {'Authorization': f'Bearer {AuthService.issue_token(user)}'}

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

@pytest.fixture
def student(app):
    return make_user('student@example.com', UserRole.STUDENT, name='Juan Student')

@pytest.fixture
def other_student(app):
    return make_user('student2@example.com', UserRole.STUDENT, name='Maria Student')

@pytest.fixture
def teacher(app):
    return make_user('teacher@example.com', UserRole.TEACHER, name='Ana Teacher')

@pytest.fixture
def secretary(app):
    return make_user('secretary@example.com', UserRole.SECRETARY, name='Sam Secretary')

@pytest.fixture
def admin(app):
    return make_user('admin@example.com', UserRole.SUPER_ADMIN, name='Super Admin')

@pytest.fixture
def period(app, teacher):
    """08:00-09:00 with a 15 minute late threshold, owned by ``teacher``."""
    return Period(
        name='Period 1',
        subject='Programming',
        teacher_id=teacher.id,
        start_time='08:00',
        end_time='09:00',
        late_threshold=15
    ).save()
