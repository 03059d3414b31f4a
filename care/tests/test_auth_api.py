"""
Signup, login and user administration through the HTTP API.
"""
from rest_framework import status
from rest_framework.test import APITestCase

from care.models import AuditEvent, User
from care.services.tokens import issue_token, verify_token


class AccountAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username='admin', password='adminpass', role='admin', name='Admin')
        self.desk = User.objects.create_user(username='desk', password='deskpass', role='receptionist', name='Desk')
        self.doctor = User.objects.create_user(username='doc', password='docpass1', role='doctor', name='Dr. Who')

    def _as(self, user) -> None:
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {issue_token(user.pk, user.role)}')

    # ------------------------------------------------------------------
    # login
    # ------------------------------------------------------------------
    def test_login_returns_token_and_updates_last_login(self) -> None:
        r = self.client.post('/api/auth/login', {'username': 'DESK', 'password': 'deskpass'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertTrue(r.data['success'])
        self.assertEqual(r.data['message'], 'Welcome back, Desk!')
        self.assertEqual(r.data['user']['username'], 'desk')
        claims = verify_token(r.data['token'])
        self.assertEqual(claims.subject_id, self.desk.pk)
        self.assertEqual(claims.role, 'receptionist')
        self.desk.refresh_from_db()
        self.assertIsNotNone(self.desk.last_login)
        self.assertTrue(AuditEvent.objects.filter(action='login', user=self.desk).exists())

    def test_login_requires_both_fields(self) -> None:
        r = self.client.post('/api/auth/login', {'username': 'desk'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['message'], 'Please provide username and password.')

    def test_login_bad_credentials(self) -> None:
        for payload in ({'username': 'desk', 'password': 'nope'}, {'username': 'ghost', 'password': 'x'}):
            r = self.client.post('/api/auth/login', payload, format='json')
            self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
            self.assertEqual(r.data, {'success': False, 'message': 'Invalid username or password.'})

    def test_login_deactivated_account(self) -> None:
        self.desk.is_active = False
        self.desk.save()
        r = self.client.post('/api/auth/login', {'username': 'desk', 'password': 'deskpass'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.data['message'], 'Account is deactivated. Contact admin.')

    def test_failed_logins_are_audited(self) -> None:
        self.desk.is_active = False
        self.desk.save()
        self.client.post('/api/auth/login', {'username': 'desk', 'password': 'deskpass'}, format='json')
        self.client.post('/api/auth/login', {'username': 'doc', 'password': 'wrong'}, format='json')
        failures = AuditEvent.objects.filter(action='login', user__isnull=True).order_by('id')
        self.assertEqual([e.detail['username'] for e in failures], ['desk', 'doc'])
        self.assertEqual([e.detail['result'] for e in failures], ['fail', 'fail'])
        self.assertEqual([e.detail['reason'] for e in failures], ['forbidden', 'bad_credentials'])

    # ------------------------------------------------------------------
    # signup
    # ------------------------------------------------------------------
    def test_public_receptionist_signup(self) -> None:
        r = self.client.post('/api/auth/signup', {
            'name': 'New Desk', 'username': 'NewDesk', 'password': 'abcdef', 'role': 'receptionist',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['message'], 'Receptionist account created successfully!')
        self.assertEqual(r.data['user']['username'], 'newdesk')
        self.assertTrue(verify_token(r.data['token']).subject_id)
        self.assertTrue(User.objects.get(username='newdesk').check_password('abcdef'))

    def test_public_doctor_signup_is_forbidden(self) -> None:
        r = self.client.post('/api/auth/signup', {
            'name': 'Dr. X', 'username': 'drx', 'password': 'abcdef', 'role': 'doctor',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.data['message'], 'Only admin or receptionist can create doctor accounts.')
        self.assertFalse(User.objects.filter(username='drx').exists())

    def test_receptionist_creates_doctor(self) -> None:
        self._as(self.desk)
        r = self.client.post('/api/auth/signup', {
            'name': 'Dr. X', 'username': 'drx', 'password': 'abcdef', 'role': 'doctor',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username='drx').role, 'doctor')

    def test_doctor_cannot_create_receptionist(self) -> None:
        self._as(self.doctor)
        r = self.client.post('/api/auth/signup', {
            'name': 'R', 'username': 'r2', 'password': 'abcdef', 'role': 'receptionist',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(r.data['message'], 'Only admin or receptionist can create receptionist accounts.')

    def test_invalid_creator_token_is_treated_as_public(self) -> None:
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not.a.token')
        r = self.client.post('/api/auth/signup', {
            'name': 'R', 'username': 'r3', 'password': 'abcdef', 'role': 'receptionist',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)

    def test_signup_validation(self) -> None:
        cases = [
            ({'username': 'x', 'password': 'abcdef', 'role': 'receptionist'},
             'Name, username, password, and role are required.'),
            ({'name': 'X', 'username': 'x', 'password': 'abcdef', 'role': 'admin'},
             'Role must be doctor or receptionist.'),
            ({'name': 'X', 'username': 'x', 'password': 'abc', 'role': 'receptionist'},
             'Password must be at least 6 characters.'),
        ]
        for payload, message in cases:
            r = self.client.post('/api/auth/signup', payload, format='json')
            self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST, payload)
            self.assertEqual(r.data['message'], message)

    def test_duplicate_username_conflicts(self) -> None:
        r = self.client.post('/api/auth/signup', {
            'name': 'Other', 'username': 'Desk', 'password': 'abcdef', 'role': 'receptionist',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(r.data['message'], 'Username already taken. Please choose another.')

    # ------------------------------------------------------------------
    # me / users
    # ------------------------------------------------------------------
    def test_me(self) -> None:
        self._as(self.doctor)
        r = self.client.get('/api/auth/me')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['user']['name'], 'Dr. Who')
        self.assertNotIn('password', r.data['user'])

    def test_list_and_delete_users(self) -> None:
        self._as(self.desk)
        r = self.client.get('/api/auth/users')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['count'], 3)

        r = self.client.delete(f'/api/auth/users/{self.doctor.pk}')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['message'], 'User deleted.')
        self.assertFalse(User.objects.filter(pk=self.doctor.pk).exists())

        r = self.client.delete(f'/api/auth/users/{self.doctor.pk}')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data['message'], 'User not found.')


class SeedAccountsCommandTests(APITestCase):
    def test_seed_is_idempotent_and_skips_existing(self) -> None:
        from django.core.management import call_command

        User.objects.create_user(username='doctor', password='keepme1', role='doctor', name='Existing')
        call_command('seed_accounts', '--admin-password', 'rootpass')
        call_command('seed_accounts')

        self.assertEqual(User.objects.filter(username='doctor').count(), 1)
        self.assertTrue(User.objects.get(username='doctor').check_password('keepme1'))
        self.assertTrue(User.objects.get(username='receptionist').check_password('reception123'))
        self.assertEqual(User.objects.get(username='admin').role, 'admin')
