from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework.authtoken.models import Token
from rest_framework import status

User = get_user_model()

STRONG_PASSWORD = "Tr1cky-Lantern-42"


class AuthTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.student = User.objects.create_user(
            email='student@test.com',
            password=STRONG_PASSWORD,
            name='Ada Student',
        )

    def test_register(self):
        """Registering creates a student with a token"""
        response = self.client.post('/api/auth/register/', {
            'email': 'new@test.com',
            'name': 'New Person',
            'password': STRONG_PASSWORD,
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.json()['data']
        self.assertEqual(data['role'], User.ROLE_STUDENT)
        self.assertNotIn('password', data)

        user = User.objects.get(email='new@test.com')
        self.assertTrue(user.check_password(STRONG_PASSWORD))
        self.assertTrue(Token.objects.filter(user=user).exists())

    def test_register_cannot_pick_role(self):
        response = self.client.post('/api/auth/register/', {
            'email': 'sneaky@test.com',
            'password': STRONG_PASSWORD,
            'role': 'admin',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(email='sneaky@test.com').role, User.ROLE_STUDENT)

    def test_register_duplicate_email_any_case(self):
        response = self.client.post('/api/auth/register/', {
            'email': 'STUDENT@test.com',
            'password': STRONG_PASSWORD,
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.json()['data'])

    def test_register_weak_password(self):
        response = self.client.post('/api/auth/register/', {
            'email': 'weak@test.com',
            'password': 'password',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login(self):
        response = self.client.post('/api/auth/login/', {
            'email': 'student@test.com',
            'password': STRONG_PASSWORD,
        })
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()['data']
        self.assertEqual(data['token'], Token.objects.get(user=self.student).key)
        self.assertEqual(data['role'], 'student')

    def test_login_wrong_password(self):
        response = self.client.post('/api/auth/login', {
            'email': 'student@test.com',
            'password': 'not-it',
        })
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json()['message'], "Invalid email or password")

    def test_token_authenticates(self):
        token = Token.objects.get(user=self.student)
        self.client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')
        response = self.client.get('/api/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()['data']['email'], 'student@test.com')

    def test_update_profile(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.put('/api/auth/me/', {'name': 'Ada L.', 'email': 'other@test.com'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.student.refresh_from_db()
        self.assertEqual(self.student.name, 'Ada L.')
        self.assertEqual(self.student.email, 'student@test.com')

    def test_logout_drops_token(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/auth/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Token.objects.filter(user=self.student).exists())


class ChangeRoleTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_superuser(email='admin@test.com', password=STRONG_PASSWORD)
        self.student = User.objects.create_user(email='student@test.com', password=STRONG_PASSWORD)

    def test_superuser_is_admin_role(self):
        self.assertEqual(self.admin.role, User.ROLE_ADMIN)
        self.assertTrue(self.admin.is_admin_role)

    def test_admin_promotes_instructor(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/auth/change-role/', {'user_id': self.student.id, 'role': 'instructor'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.student.refresh_from_db()
        self.assertTrue(self.student.is_instructor_role)

    def test_student_cannot_change_roles(self):
        self.client.force_authenticate(user=self.student)
        response = self.client.post('/api/auth/change-role/', {'user_id': self.student.id, 'role': 'admin'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.json()['success'])

    def test_unknown_user(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/auth/change-role/', {'user_id': 999999, 'role': 'instructor'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_admin_registers_account_with_role(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post('/api/auth/register/', {
            'email': 'tutor@test.com',
            'password': STRONG_PASSWORD,
            'role': 'instructor',
        })
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()['data']['role'], User.ROLE_INSTRUCTOR)
        self.assertEqual(User.objects.get(email='tutor@test.com').role, User.ROLE_INSTRUCTOR)

    def test_instructor_cannot_register_with_role(self):
        instructor = User.objects.create_user(
            email='teach@test.com', password=STRONG_PASSWORD, role=User.ROLE_INSTRUCTOR
        )
        self.client.force_authenticate(user=instructor)
        self.client.post('/api/auth/register/', {
            'email': 'friend@test.com',
            'password': STRONG_PASSWORD,
            'role': 'admin',
        })
        self.assertEqual(User.objects.get(email='friend@test.com').role, User.ROLE_STUDENT)
