from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

User = get_user_model()


class LoginTests(APITestCase):
    """Admin login with email and password"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email='admin@h2o.test',
            password='Admin@123',
            full_name='Store Admin',
            role=User.Role.ADMIN,
        )

    def test_login_returns_user_and_tokens(self):
        resp = self.client.post('/api/login/', {'email': 'admin@h2o.test', 'password': 'Admin@123'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data['success'])
        self.assertEqual(resp.data['data']['user']['email'], 'admin@h2o.test')
        self.assertEqual(resp.data['data']['user']['role'], 'ADMIN')
        self.assertIn('access_token', resp.data['data']['tokens'])
        self.assertIn('refresh_token', resp.data['data']['tokens'])

    def test_password_is_stored_hashed(self):
        self.assertNotEqual(self.admin.password, 'Admin@123')
        self.assertTrue(self.admin.password.startswith('bcrypt'))

    def test_wrong_password_is_unauthorized(self):
        resp = self.client.post('/api/login/', {'email': 'admin@h2o.test', 'password': 'nope'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(resp.data['success'])
        self.assertEqual(resp.data['error'], 'Invalid credentials')

    def test_unknown_email_is_unauthorized(self):
        resp = self.client.post('/api/login/', {'email': 'ghost@h2o.test', 'password': 'Admin@123'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_missing_fields_is_bad_request(self):
        resp = self.client.post('/api/login/', {'email': 'admin@h2o.test'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_disabled_account_is_forbidden(self):
        self.admin.is_active = False
        self.admin.save()
        resp = self.client.post('/api/login/', {'email': 'admin@h2o.test', 'password': 'Admin@123'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_repeated_failures_lock_the_account(self):
        for _ in range(5):
            self.client.post('/api/login/', {'email': 'admin@h2o.test', 'password': 'wrong'}, format='json')
        resp = self.client.post('/api/login/', {'email': 'admin@h2o.test', 'password': 'Admin@123'}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)


class SessionTests(APITestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(email='admin@h2o.test', password='Admin@123', role=User.Role.ADMIN)

    def _login(self):
        resp = self.client.post('/api/login/', {'email': 'admin@h2o.test', 'password': 'Admin@123'}, format='json')
        return resp.data['data']['tokens']

    def test_me_requires_authentication(self):
        resp = self.client.get('/api/me/')
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_returns_current_user(self):
        tokens = self._login()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")
        resp = self.client.get('/api/me/')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(resp.data['data']['email'], 'admin@h2o.test')

    def test_logout_revokes_refresh_token(self):
        tokens = self._login()
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")
        resp = self.client.post('/api/logout/', {'refresh_token': tokens['refresh_token']}, format='json')
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertTrue(resp.data['data']['token_revoked'])
