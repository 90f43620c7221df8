"""
Student roster tests: generated codes, lookup by code, phone validation.
"""
from datetime import date
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from attendance.models import AttendanceRecord
from groups.models import GradeLevel, Group
from students.models import Student
from students.services import create_student, generate_code, get_by_code


class StudentServiceTests(TestCase):
    def setUp(self):
        self.grade = GradeLevel.objects.get(code='1')

    def test_code_format(self):
        code = generate_code(today=date(2026, 9, 1))
        self.assertRegex(code, r'^ST26\d{4}$')

    def test_code_collision_is_retried(self):
        taken = create_student(name='First', grade=self.grade, parent_phone='01012345678')
        with mock.patch('students.services.generate_code', side_effect=[taken.code, 'ST269999']):
            student = create_student(name='Second', grade=self.grade, parent_phone='01012345679')
        self.assertEqual(student.code, 'ST269999')

    def test_lookup_is_case_and_space_tolerant(self):
        student = create_student(name='Ola', grade=self.grade, parent_phone='01012345678')
        self.assertEqual(get_by_code(f"  {student.code.lower()} "), student)
        self.assertIsNone(get_by_code(''))
        self.assertIsNone(get_by_code('ST000000'))


class StudentApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@center.test", password="pass123", full_name="Admin", role=User.ROLE_ADMIN,
        )
        self.assistant = User.objects.create_user(
            email="assistant@center.test", password="pass123", full_name="Assistant", role=User.ROLE_ASSISTANT,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.assistant)}")
        self.grade = GradeLevel.objects.get(code='2')

    def test_create_student_generates_code(self):
        res = self.client.post("/api/students/", {
            "name": "Malak", "grade": "2", "parent_phone": "010 1234 5678", "monthly_fee": "200",
        }, format="json")
        self.assertEqual(res.status_code, 201)
        self.assertTrue(res.data['code'].startswith('ST'))
        self.assertEqual(res.data['parent_phone'], '01012345678')

    def test_invalid_phone_rejected(self):
        res = self.client.post("/api/students/", {
            "name": "Malak", "grade": "2", "parent_phone": "12345",
        }, format="json")
        self.assertEqual(res.status_code, 400)
        self.assertIn('parent_phone', res.data['errors'])

    def test_group_from_other_grade_rejected(self):
        group = Group.objects.create(name='G3', grade=GradeLevel.objects.get(code='3'))
        res = self.client.post("/api/students/", {
            "name": "Malak", "grade": "2", "group": str(group.pk), "parent_phone": "01012345678",
        }, format="json")
        self.assertEqual(res.status_code, 400)

    def test_only_admin_deletes_and_history_cascades(self):
        student = create_student(name='Omar', grade=self.grade, parent_phone='01012345678')
        AttendanceRecord.objects.create(student=student, date=date(2026, 3, 1), present=True)

        res = self.client.delete(f"/api/students/{student.pk}")
        self.assertEqual(res.status_code, 403)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.admin)}")
        res = self.client.delete(f"/api/students/{student.pk}")
        self.assertEqual(res.status_code, 204)
        self.assertFalse(Student.objects.exists())
        self.assertFalse(AttendanceRecord.objects.exists())

    def test_by_code_lookup(self):
        student = create_student(name='Omar', grade=self.grade, parent_phone='01012345678')
        res = self.client.get(f"/api/students/by-code/{student.code.lower()}")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.data['id'], str(student.pk))
