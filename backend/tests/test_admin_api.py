"""Administration and teacher role management tests."""
from qrattend.models.attendance import AttendanceStatus, LocationStatus
from qrattend.models.user import User, UserRole
from qrattend.services.attendance_service import AttendanceService
from qrattend.services.decision_service import Decision
from tests.conftest import SCAN_DAY, auth_headers

def record_attendance(student, period, status=AttendanceStatus.ON_TIME,
                      location_status=LocationStatus.VERIFIED):
    return AttendanceService.try_create(student.id, period.id, SCAN_DAY, Decision(status, location_status))

def test_stats(client, admin, student, other_student, period):
    record_attendance(student, period)
    record_attendance(other_student, period, AttendanceStatus.PENDING_REVIEW, LocationStatus.PENDING_REVIEW)

    response = client.get('/api/admin/stats', headers=auth_headers(admin))

    assert response.status_code == 200
    stats = response.get_json()['data']
    assert stats['total_users'] == 4
    assert stats['total_students'] == 2
    assert stats['total_teachers'] == 1
    assert stats['total_periods'] == 1
    assert stats['total_attendance'] == 2
    assert stats['pending_review'] == 1
    assert stats['verified'] == 1

def test_stats_admin_only(client, teacher):
    assert client.get('/api/admin/stats', headers=auth_headers(teacher)).status_code == 403

def test_create_and_list_users(client, admin):
    headers = auth_headers(admin)
    response = client.post('/api/admin/users', headers=headers, json={
        'email': 'sec@example.com', 'password': 'password123', 'name': 'New Secretary', 'role': 'secretary'
    })
    assert response.status_code == 201
    assert response.get_json()['data']['user']['role'] == 'secretary'

    secretaries = client.get('/api/admin/users?role=secretary', headers=headers).get_json()['data']['users']
    assert [u['email'] for u in secretaries] == ['sec@example.com']
    assert client.get('/api/admin/users?role=janitor', headers=headers).status_code == 400

def test_delete_user(client, admin, other_student):
    response = client.delete(f'/api/admin/users/{other_student.id}', headers=auth_headers(admin))

    assert response.status_code == 200
    assert User.query.filter_by(email='student2@example.com').first() is None

def test_delete_refuses_users_with_attendance(client, admin, student, period):
    record_attendance(student, period)

    response = client.delete(f'/api/admin/users/{student.id}', headers=auth_headers(admin))
    assert response.status_code == 409

def test_delete_self_refused(client, admin):
    assert client.delete(f'/api/admin/users/{admin.id}', headers=auth_headers(admin)).status_code == 409

def test_deleting_teacher_keeps_period(client, admin, teacher, period):
    client.delete(f'/api/admin/users/{teacher.id}', headers=auth_headers(admin))
    assert period.teacher_id is None

def test_teacher_promotes_own_student(client, teacher, student, period):
    record_attendance(student, period)
    headers = auth_headers(teacher)

    response = client.patch(f'/api/teacher/students/{student.id}/role', headers=headers,
                            json={'role': 'secretary'})
    assert response.status_code == 200
    assert student.role == UserRole.SECRETARY

    response = client.patch(f'/api/teacher/students/{student.id}/role', headers=headers,
                            json={'role': 'student'})
    assert response.get_json()['data']['user']['role'] == 'student'

def test_teacher_cannot_promote_unknown_student(client, teacher, student, period):
    response = client.patch(f'/api/teacher/students/{student.id}/role', headers=auth_headers(teacher),
                            json={'role': 'secretary'})
    assert response.status_code == 403

def test_teacher_cannot_grant_admin(client, teacher, student, period):
    record_attendance(student, period)
    response = client.patch(f'/api/teacher/students/{student.id}/role', headers=auth_headers(teacher),
                            json={'role': 'super_admin'})
    assert response.status_code == 400

def test_role_change_rejects_non_object_body(client, teacher, student, period):
    record_attendance(student, period)

    response = client.patch(f'/api/teacher/students/{student.id}/role', headers=auth_headers(teacher),
                            json=['secretary'])
    assert response.status_code == 400
    assert response.get_json()['code'] == 'invalid_input'
