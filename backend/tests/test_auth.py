"""Test authentication endpoints."""
import json

import pytest

from qrattend.models.user import User, UserRole
from qrattend.services.auth_service import AuthService
from tests.conftest import auth_headers

def test_health_check(client):
    """Test auth health endpoint."""
    response = client.get('/api/auth/health')
    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['message'] == 'Auth service is running'

def test_app_health(client):
    response = client.get('/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'healthy'

def test_register_success(client):
    """Test successful user registration."""
    response = client.post('/api/auth/register',
        json={
            'email': 'NewUser@example.com',
            'password': 'password123',
            'name': 'New User',
            'role': 'student',
            'student_lrn': '123456789012'
        })

    assert response.status_code == 201
    data = json.loads(response.data)
    assert data['error'] == False
    assert data['data']['access_token']
    assert data['data']['user']['email'] == 'newuser@example.com'
    assert data['data']['user']['role'] == 'student'
    assert 'password_hash' not in data['data']['user']

def test_register_validation(client):
    """Test registration validation."""
    # Missing fields
    response = client.post('/api/auth/register', json={})
    assert response.status_code == 400
    assert response.get_json()['code'] == 'invalid_input'

    # Invalid email
    response = client.post('/api/auth/register',
        json={
            'email': 'invalid-email',
            'password': 'password123',
            'name': 'Test User',
            'role': 'student'
        })
    assert response.status_code == 400

    # Short password
    response = client.post('/api/auth/register',
        json={
            'email': 'short@example.com',
            'password': '123',
            'name': 'Test User',
            'role': 'student'
        })
    assert response.status_code == 400

def test_register_cannot_self_assign_admin(client):
    response = client.post('/api/auth/register',
        json={
            'email': 'sneaky@example.com',
            'password': 'password123',
            'name': 'Sneaky',
            'role': 'super_admin'
        })
    assert response.status_code == 400
    assert User.query.filter_by(email='sneaky@example.com').first() is None

def test_register_duplicate_email(client, student):
    response = client.post('/api/auth/register',
        json={
            'email': student.email,
            'password': 'password123',
            'name': 'Copy Cat',
            'role': 'student'
        })
    assert response.status_code == 400
    assert response.get_json()['message'] == 'User already exists'

def test_login_success(client, student):
    """Test successful login."""
    response = client.post('/api/auth/login',
        json={
            'email': 'student@example.com',
            'password': 'password123'
        })

    assert response.status_code == 200
    data = json.loads(response.data)
    assert data['data']['access_token']
    assert data['data']['user']['id'] == student.id

def test_login_invalid_credentials(client, student):
    """Test login with wrong password."""
    response = client.post('/api/auth/login',
        json={
            'email': 'student@example.com',
            'password': 'wrongpassword'
        })

    assert response.status_code == 401
    assert response.get_json()['code'] == 'unauthorized'

def test_me_lists_capabilities(client, teacher):
    response = client.get('/api/auth/me', headers=auth_headers(teacher))

    assert response.status_code == 200
    data = response.get_json()['data']
    assert data['email'] == 'teacher@example.com'
    assert 'issue_qr' in data['capabilities']
    assert 'scan_attendance' not in data['capabilities']

def test_me_requires_token(client):
    response = client.get('/api/auth/me')
    assert response.status_code == 401

def test_change_password(client, student):
    response = client.post('/api/auth/change-password', headers=auth_headers(student),
        json={'current_password': 'password123', 'new_password': 'newsecret1'})
    assert response.status_code == 200

    assert AuthService.login('student@example.com', 'newsecret1')['user']['id'] == student.id

def test_change_password_wrong_current(client, student):
    response = client.post('/api/auth/change-password', headers=auth_headers(student),
        json={'current_password': 'nope', 'new_password': 'newsecret1'})
    assert response.status_code == 400

def test_ensure_super_admin_is_idempotent(app):
    assert AuthService.ensure_super_admin('root@example.com', 'rootpass') is True
    assert AuthService.ensure_super_admin('root@example.com', 'rootpass') is False

    admin = User.query.filter_by(email='root@example.com').one()
    assert admin.role == UserRole.SUPER_ADMIN

@pytest.mark.parametrize('path', ['/api/auth/register', '/api/auth/login'])
def test_non_object_body_is_invalid_input(client, path):
    response = client.post(path, json=['student@example.com', 'password123'])

    assert response.status_code == 400
    assert response.get_json()['code'] == 'invalid_input'

def test_non_string_credentials_fail_cleanly(client, student):
    response = client.post('/api/auth/register',
        json={'email': ['a@example.com'], 'password': 123456, 'name': 7, 'role': 'student'})
    assert response.status_code == 400

    response = client.post('/api/auth/login', json={'email': 42, 'password': ['x']})
    assert response.status_code == 401

def test_change_password_rejects_non_object_body(client, student):
    response = client.post('/api/auth/change-password', headers=auth_headers(student), json='secret')
    assert response.status_code == 400
