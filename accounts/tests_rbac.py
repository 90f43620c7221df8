"""
Minimal RBAC tests: role-based access control.
- Assistant token hitting admin endpoint returns 403
- Missing token returns 401
- Admin token hitting admin endpoint returns 200
- Login returns a usable token pair
"""
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User


class RBACTests(TestCase):
    def setUp(self):
        self.client = APIClient()

        self.admin = User.objects.create_user(
            email="admin@center.test",
            password="pass123",
            full_name="Admin",
            role=User.ROLE_ADMIN,
        )
        self.assistant = User.objects.create_user(
            email="assistant@center.test",
            password="pass123",
            full_name="Assistant",
            role=User.ROLE_ASSISTANT,
        )

    def _auth_header(self, user: User) -> dict:
        token = str(AccessToken.for_user(user))
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    def test_assistant_toggling_rule_returns_403(self):
        self.client.credentials(**self._auth_header(self.assistant))
        res = self.client.patch("/api/alerts/rules/absent_3_month", {"is_active": False}, format="json")
        self.assertEqual(res.status_code, 403)

    def test_assistant_updating_settings_returns_403(self):
        self.client.credentials(**self._auth_header(self.assistant))
        res = self.client.patch(
            "/api/settings/",
            {"settings": [{"key": "teacher_name", "value": "X"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 403)

    def test_assistant_can_read_rules(self):
        self.client.credentials(**self._auth_header(self.assistant))
        res = self.client.get("/api/alerts/rules")
        self.assertEqual(res.status_code, 200)

    def test_admin_toggling_rule_returns_200(self):
        self.client.credentials(**self._auth_header(self.admin))
        res = self.client.patch("/api/alerts/rules/absent_3_month", {"is_active": False}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertFalse(res.data["is_active"])

    def test_missing_token_returns_401(self):
        res = self.client.get("/api/students/")
        self.assertEqual(res.status_code, 401)


class LoginTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            email="admin@center.test",
            password="pass123",
            full_name="Admin",
            role=User.ROLE_ADMIN,
        )

    def test_login_returns_tokens_and_user(self):
        res = self.client.post("/api/auth/login", {"email": "ADMIN@center.test", "password": "pass123"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data["user"]["role"], "admin")

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {res.data['accessToken']}")
        me = self.client.get("/api/auth/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.data["email"], "admin@center.test")

    def test_wrong_password_returns_401(self):
        res = self.client.post("/api/auth/login", {"email": "admin@center.test", "password": "nope"}, format="json")
        self.assertEqual(res.status_code, 401)

    def test_disabled_account_returns_401(self):
        self.user.is_active = False
        self.user.save()
        res = self.client.post("/api/auth/login", {"email": "admin@center.test", "password": "pass123"}, format="json")
        self.assertEqual(res.status_code, 401)
