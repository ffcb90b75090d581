from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient
from rest_framework import status
from admin_panel.models import AdminActivity
from .models import Role

User = get_user_model()


class AuthenticationTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(
            email='intern@nexbyte.test', password='intern12345', name='Ada Intern', role=Role.INTERN
        )
        self.client = APIClient()

    def test_token_created_for_new_user(self):
        self.assertTrue(Token.objects.filter(user=self.intern).exists())

    def test_superuser_is_admin(self):
        self.assertEqual(self.admin_user.role, Role.ADMIN)
        self.assertTrue(self.admin_user.is_staff)

    def test_login_returns_token_and_profile(self):
        response = self.client.post(
            '/api/users/login/', {'email': 'intern@nexbyte.test', 'password': 'intern12345'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['token'], Token.objects.get(user=self.intern).key)
        self.assertEqual(response.data['user']['role'], 'intern')
        self.assertEqual(response.data['user']['name'], 'Ada Intern')

    def test_login_with_wrong_password(self):
        response = self.client.post(
            '/api/users/login/', {'email': 'intern@nexbyte.test', 'password': 'wrong-password'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bearer_token_authenticates(self):
        token = Token.objects.get(user=self.intern)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.key}')
        response = self.client.get('/api/users/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'intern@nexbyte.test')
        self.assertIsNone(response.data['certificate'])

    def test_invalid_token_is_unauthorized(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-real-token')
        response = self.client.get('/api/users/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/users/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_revokes_token(self):
        token = Token.objects.get(user=self.intern)
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.key}')
        response = self.client.post('/api/users/logout/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Token.objects.filter(key=token.key).exists())

    def test_admin_login_is_audited(self):
        self.client.post(
            '/api/users/login/', {'email': 'admin@nexbyte.test', 'password': 'admin12345'}, format='json'
        )
        self.assertTrue(AdminActivity.objects.filter(admin=self.admin_user, action='LOGIN').exists())

    def test_register_always_creates_member(self):
        response = self.client.post('/api/users/register/', {
            'email': 'new@nexbyte.test',
            'password': 'member12345',
            'name': 'New Member',
            'role': 'admin',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(email='new@nexbyte.test').role, Role.MEMBER)

    def test_register_rejects_duplicate_email(self):
        response = self.client.post('/api/users/register/', {
            'email': 'INTERN@nexbyte.test',
            'password': 'member12345',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)


class UserManagementTestCase(TestCase):
    def setUp(self):
        self.admin_user = User.objects.create_superuser(email='admin@nexbyte.test', password='admin12345')
        self.intern = User.objects.create_user(
            email='intern@nexbyte.test', password='intern12345', role=Role.INTERN
        )
        self.member = User.objects.create_user(email='member@nexbyte.test', password='member12345')
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin_user)

    def test_list_users_filtered_by_role(self):
        response = self.client.get('/api/users/', {'role': 'intern'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([u['email'] for u in response.data], ['intern@nexbyte.test'])

    def test_create_intern(self):
        response = self.client.post('/api/users/', {
            'email': 'second@nexbyte.test',
            'name': 'Second Intern',
            'password': 'intern12345',
            'role': 'intern',
            'internship_start_date': '2026-01-01',
            'internship_end_date': '2026-03-31',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        user = User.objects.get(email='second@nexbyte.test')
        self.assertTrue(user.check_password('intern12345'))
        self.assertNotIn('password', response.data)
        self.assertTrue(AdminActivity.objects.filter(action='CREATE', model_name='User', object_id=user.id).exists())

    def test_create_requires_password(self):
        response = self.client.post('/api/users/', {'email': 'nopass@nexbyte.test', 'role': 'intern'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_end_date_before_start_date_rejected(self):
        response = self.client.patch(f'/api/users/{self.intern.id}/', {
            'internship_start_date': '2026-03-01',
            'internship_end_date': '2026-01-01',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_deactivates_instead_of_removing(self):
        response = self.client.delete(f'/api/users/{self.intern.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['is_active'])

        self.intern.refresh_from_db()
        self.assertFalse(self.intern.is_active)
        self.assertFalse(Token.objects.filter(user=self.intern).exists())
        self.assertTrue(AdminActivity.objects.filter(action='DEACTIVATE', object_id=self.intern.id).exists())

    def test_admin_cannot_deactivate_self(self):
        response = self.client.delete(f'/api/users/{self.admin_user.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.admin_user.refresh_from_db()
        self.assertTrue(self.admin_user.is_active)

    def test_non_admin_is_forbidden(self):
        client = APIClient()
        client.force_authenticate(user=self.member)
        response = client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        client.force_authenticate(user=self.intern)
        response = client.delete(f'/api/users/{self.member.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
