"""
Application settings tests: the context is loaded once and reloaded on update.
"""
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from core.context import AppContext, get_app_context, invalidate_app_context, update_settings
from core.models import AppSetting


class AppContextTests(TestCase):
    def setUp(self):
        invalidate_app_context()

    def tearDown(self):
        invalidate_app_context()

    def test_defaults_when_table_empty(self):
        ctx = get_app_context()
        self.assertEqual(ctx.teacher_name, 'محمد مجدي')
        self.assertFalse(ctx.sms_enabled)

    def test_context_is_cached_until_update(self):
        first = get_app_context()
        AppSetting.objects.create(key='teacher_name', value='أحمد')
        self.assertIs(get_app_context(), first)

        ctx = update_settings({'system_name': 'سنتر النور', 'sms_enabled': 'true'})
        self.assertEqual(ctx.teacher_name, 'أحمد')
        self.assertEqual(ctx.system_name, 'سنتر النور')
        self.assertTrue(ctx.sms_enabled)

    def test_unknown_keys_kept_in_extra(self):
        ctx = AppContext.from_mapping({'center_address': 'Cairo', 'teacher_name': ''})
        self.assertEqual(ctx.extra, {'center_address': 'Cairo'})
        self.assertEqual(ctx.teacher_name, 'محمد مجدي')


class AppSettingsApiTests(TestCase):
    def setUp(self):
        invalidate_app_context()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@center.test", password="pass123", full_name="Admin", role=User.ROLE_ADMIN,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.admin)}")

    def tearDown(self):
        invalidate_app_context()

    def test_update_returns_reloaded_context(self):
        res = self.client.patch(
            "/api/settings/",
            {"settings": [{"key": "teacher_name", "value": "سامي"}]},
            format="json",
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['teacherName'], 'سامي')
        self.assertEqual(get_app_context().teacher_name, 'سامي')
