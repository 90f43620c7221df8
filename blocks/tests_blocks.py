"""
Block store tests: one active block per student, freeze/unfreeze round trip,
history management.
"""
from unittest import mock

from django.db import IntegrityError
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from blocks.models import StudentBlock
from blocks.services import BlockStore
from groups.models import GradeLevel
from students.services import create_student


class BlockStoreTests(TestCase):
    def setUp(self):
        self.student = create_student(
            name='Sara', grade=GradeLevel.objects.get(code='3'), parent_phone='01212345678',
        )
        self.store = BlockStore.load()

    def test_freeze_twice_keeps_single_active_row(self):
        first = self.store.freeze(self.student, 'عدم السداد')
        second = self.store.freeze(self.student, 'غياب متكرر', triggered_by_rule_code='absent_3_month')

        self.assertEqual(first.pk, second.pk)
        active = StudentBlock.objects.filter(student=self.student, is_active=True)
        self.assertEqual(active.count(), 1)
        self.assertEqual(active.get().reason, 'غياب متكرر')
        self.assertEqual(active.get().triggered_by_rule_code, 'absent_3_month')

    def test_unfreeze_lifts_block(self):
        self.store.freeze(self.student, 'x')
        self.assertTrue(self.store.is_blocked(self.student))

        self.assertTrue(self.store.unfreeze(self.student))
        self.assertFalse(self.store.is_blocked(self.student))
        self.assertFalse(BlockStore.load().is_blocked(self.student.pk))
        self.assertFalse(self.store.unfreeze(self.student))

    def test_refreeze_after_unfreeze_adds_history_row(self):
        self.store.freeze(self.student, 'first')
        self.store.unfreeze(self.student)
        self.store.freeze(self.student, 'second')

        history = self.store.history(self.student)
        self.assertEqual(len(history), 2)
        self.assertEqual(sum(1 for b in history if b.is_active), 1)

    def test_check_returns_reason(self):
        self.assertIsNone(self.store.check(self.student))
        self.store.freeze(self.student, 'موقوف')
        outcome = self.store.check(str(self.student.pk))
        self.assertEqual(outcome.reason, 'موقوف')
        self.assertEqual(outcome.student_id, str(self.student.pk))

    def test_insert_race_falls_back_to_update(self):
        original = BlockStore._upsert_active
        calls = []

        def racing(store, student_id, fields):
            calls.append(student_id)
            if len(calls) == 1:
                StudentBlock.objects.create(student_id=student_id, is_active=True, reason='winner')
                raise IntegrityError('duplicate active block')
            return original(store, student_id, fields)

        with mock.patch.object(BlockStore, '_upsert_active', racing):
            block = self.store.freeze(self.student, 'loser')

        self.assertEqual(len(calls), 2)
        self.assertEqual(block.reason, 'loser')
        self.assertEqual(StudentBlock.objects.filter(student=self.student, is_active=True).count(), 1)

    def test_history_entry_delete_skips_active_block(self):
        active = self.store.freeze(self.student, 'x')
        self.assertFalse(self.store.delete_history_entry(active.pk))

        self.store.unfreeze(self.student)
        self.assertTrue(self.store.delete_history_entry(active.pk))
        self.assertFalse(StudentBlock.objects.exists())


class BlockApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@center.test", password="pass123", full_name="Admin", role=User.ROLE_ADMIN,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.admin)}")
        self.student = create_student(
            name='Hana', grade=GradeLevel.objects.get(code='1'), parent_phone='01012345678',
        )

    def test_freeze_and_unfreeze_endpoints(self):
        res = self.client.post(f"/api/blocks/students/{self.student.pk}/freeze", {"reason": "x"}, format="json")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data['is_active'])

        res = self.client.get(f"/api/blocks/students/{self.student.pk}")
        self.assertTrue(res.data['isBlocked'])

        res = self.client.post(f"/api/blocks/students/{self.student.pk}/unfreeze")
        self.assertEqual(res.data, {'unfrozen': True})

    def test_deleting_active_block_returns_400(self):
        block = BlockStore.load().freeze(self.student, 'x')
        res = self.client.delete(f"/api/blocks/{block.pk}")
        self.assertEqual(res.status_code, 400)
