"""
Offline queue tests.
- writes while offline are queued and replayed in order on reconnect
- failed replays stay queued and stall after the attempt cap
- online writes fall back to the queue on any failure
- reconnect listeners fire once per offline -> online transition
- while offline, writes and sync passes recheck the primary store, throttled
- a claimed operation is replayed by one worker only
"""
import time
from datetime import timedelta
from io import StringIO
from unittest import mock

from django.core.management import call_command
from django.db import IntegrityError, OperationalError
from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from accounts.models import User
from blocks.services import BlockStore
from groups.models import GradeLevel, Group
from offline.connectivity import ConnectivityMonitor
from offline.entities import EntityKind, handler_for
from offline.models import OfflineOperation
from offline.operations import offline_delete, offline_insert, offline_update
from offline.queue import OfflineQueue
from offline.remote import RemoteStore
from offline.services import get_sync_service, reset_sync_service
from offline.sync import REASON_ALREADY_SYNCING, REASON_OFFLINE, SyncService
from payments.models import Payment
from students.services import create_student


class OfflineTestCase(TestCase):
    databases = {"default", "offline"}

    def setUp(self):
        self.grade = GradeLevel.objects.get(code='1')
        self.queue = OfflineQueue()
        self.remote = RemoteStore()
        self.monitor = ConnectivityMonitor(remote=self.remote, online=False, recheck_interval=3600)
        self.service = SyncService(queue=self.queue, remote=self.remote, monitor=self.monitor)

    def _unsynced(self):
        return OfflineOperation.objects.using('offline').filter(synced=False)


class EntityKindTests(OfflineTestCase):
    def test_unknown_table_rejected(self):
        with self.assertRaises(ValueError):
            handler_for('teachers')
        with self.assertRaises(ValueError):
            self.queue.enqueue('teachers', 'insert', {'id': 'x'})
        with self.assertRaises(ValueError):
            offline_insert('teachers', {}, service=self.service)

    def test_every_kind_resolves_a_model(self):
        for kind in EntityKind:
            self.assertIsNotNone(handler_for(kind.value).model)


class OfflineRoundTripTests(OfflineTestCase):
    def test_offline_writes_replay_in_order_on_reconnect(self):
        group_b = Group.objects.create(name='B', grade=self.grade)

        created = offline_insert('groups', {'name': 'A', 'grade': '1', 'days': ['monday']}, service=self.service)
        updated = offline_update('groups', created.id, {'name': 'A2'}, service=self.service)
        deleted = offline_delete('groups', group_b.pk, service=self.service)

        for result in (created, updated, deleted):
            self.assertTrue(result.success)
            self.assertTrue(result.offline)
        self.assertEqual(self.queue.count_unsynced(), 3)
        self.assertEqual(
            [op.type for op in self.queue.list_unsynced()],
            ['insert', 'update', 'delete'],
        )
        self.assertFalse(Group.objects.filter(pk=created.id).exists())

        self.assertTrue(self.monitor.set_online(True))

        report = self.service.last_report
        self.assertEqual((report.success_count, report.fail_count), (3, 0))
        self.assertEqual(self.queue.count_unsynced(), 0)
        self.assertFalse(OfflineOperation.objects.using('offline').exists())
        self.assertEqual(Group.objects.get(pk=created.id).name, 'A2')
        self.assertFalse(Group.objects.filter(pk=group_b.pk).exists())
        self.assertIsNotNone(self.service.last_sync_at)

    def test_insert_keeps_caller_id(self):
        result = offline_insert(
            'groups', {'id': 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', 'name': 'C', 'grade': '1'}, service=self.service,
        )
        self.assertEqual(result.id, 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c')

    def test_sync_skipped_while_offline(self):
        offline_insert('groups', {'name': 'A', 'grade': '1'}, service=self.service)
        report = self.service.sync_all()
        self.assertFalse(report.ran)
        self.assertEqual(report.reason, REASON_OFFLINE)
        self.assertEqual(self.queue.count_unsynced(), 1)

    def test_sync_skipped_while_already_syncing(self):
        self.monitor.set_online(True)
        with self.service._lock:
            self.assertTrue(self.service.is_syncing)
            report = self.service.sync_all()
        self.assertFalse(report.ran)
        self.assertEqual(report.reason, REASON_ALREADY_SYNCING)


class ReplayFailureTests(OfflineTestCase):
    def test_failed_operation_stays_queued_and_others_continue(self):
        offline_update('groups', 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', {'name': 'ghost'}, service=self.service)
        offline_insert('groups', {'name': 'A', 'grade': '1'}, service=self.service)

        self.monitor.set_online(True)

        report = self.service.last_report
        self.assertEqual((report.success_count, report.fail_count), (1, 1))
        remaining = self.queue.list_unsynced()
        self.assertEqual(len(remaining), 1)
        self.assertEqual(remaining[0].attempts, 1)
        self.assertIn('does not exist', remaining[0].last_error)
        self.assertTrue(Group.objects.filter(name='A').exists())

    def test_operation_stalls_after_attempt_cap(self):
        op_id = self.queue.enqueue('groups', 'update', {'id': 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', 'name': 'x'})
        self.monitor.set_online(True)
        self.service.sync_all()
        self.service.sync_all()

        self.assertEqual(len(self.queue.stalled()), 1)
        report = self.service.sync_all()
        self.assertEqual((report.fail_count, report.skipped_count), (0, 1))
        self.assertEqual(self.queue.count_unsynced(), 1)

        self.assertTrue(self.queue.retry(op_id))
        self.assertEqual(self.queue.stalled(), [])
        self.assertTrue(self.queue.discard(op_id))
        self.assertEqual(self.queue.count_unsynced(), 0)

    def test_connection_loss_ends_pass(self):
        for name in ('A', 'B', 'C'):
            offline_insert('groups', {'name': name, 'grade': '1'}, service=self.service)
        self.monitor._online = True

        with mock.patch.object(
            self.remote, 'apply_operation', side_effect=[None, OperationalError('server closed the connection')],
        ):
            report = self.service.sync_all()

        self.assertEqual((report.success_count, report.fail_count, report.skipped_count), (1, 1, 1))
        self.assertFalse(self.monitor.is_online)
        self.assertEqual(self.queue.count_unsynced(), 2)

    def test_mark_synced_is_single_shot(self):
        op_id = self.queue.enqueue('groups', 'delete', {'id': 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c'})
        self.assertTrue(self.queue.mark_synced(op_id))
        self.assertFalse(self.queue.mark_synced(op_id))
        self.assertEqual(self.queue.purge_synced(), 1)
        self.assertEqual(self.queue.purge_synced(), 0)


class OnlineWriteTests(OfflineTestCase):
    def setUp(self):
        super().setUp()
        self.monitor.set_online(True)

    def test_online_write_goes_straight_through(self):
        result = offline_insert('groups', {'name': 'A', 'grade': '1'}, service=self.service)
        self.assertFalse(result.offline)
        self.assertTrue(Group.objects.filter(pk=result.id).exists())
        self.assertEqual(self.queue.count_unsynced(), 0)

    def test_remote_rejection_falls_back_to_queue(self):
        with mock.patch.object(self.remote, 'apply', side_effect=IntegrityError('duplicate key')):
            result = offline_insert('groups', {'name': 'A', 'grade': '1'}, service=self.service)
        self.assertTrue(result.success)
        self.assertTrue(result.offline)
        self.assertTrue(self.monitor.is_online)
        self.assertEqual(self.queue.count_unsynced(), 1)

    def test_connection_error_switches_to_offline(self):
        with mock.patch.object(self.remote, 'apply', side_effect=OperationalError('could not connect')):
            result = offline_update('groups', 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', {'name': 'x'}, service=self.service)
        self.assertTrue(result.offline)
        self.assertFalse(self.monitor.is_online)
        self.assertEqual(self.queue.count_unsynced(), 1)


class ReconnectTests(OfflineTestCase):
    def _service(self, **monitor_kwargs):
        monitor = ConnectivityMonitor(remote=self.remote, **monitor_kwargs)
        return SyncService(queue=self.queue, remote=self.remote, monitor=monitor)

    def test_write_after_connection_loss_reconnects_and_replays(self):
        service = self._service(recheck_interval=0)
        with mock.patch.object(self.remote, 'apply', side_effect=OperationalError('could not connect')):
            first = offline_insert('groups', {'name': 'A', 'grade': '1'}, service=service)
        self.assertTrue(first.offline)
        self.assertFalse(service.monitor.is_online)

        second = offline_insert('groups', {'name': 'B', 'grade': '1'}, service=service)

        self.assertFalse(second.offline)
        self.assertTrue(service.monitor.is_online)
        self.assertEqual(service.last_report.success_count, 1)
        self.assertEqual(self.queue.count_unsynced(), 0)
        self.assertTrue(Group.objects.filter(pk=first.id).exists())
        self.assertTrue(Group.objects.filter(pk=second.id).exists())

    def test_sync_rechecks_connection_while_offline(self):
        service = self._service(online=False, recheck_interval=0)
        offline_insert('groups', {'name': 'A', 'grade': '1'}, service=self.service)

        report = service.sync_all()

        self.assertTrue(report.ran)
        self.assertEqual(report.success_count, 1)
        self.assertTrue(service.monitor.is_online)
        self.assertEqual(self.queue.count_unsynced(), 0)

    def test_writes_stay_queued_until_recheck_is_due(self):
        remote = mock.Mock()
        monitor = ConnectivityMonitor(remote=remote, online=False, recheck_interval=60)
        service = SyncService(queue=self.queue, remote=remote, monitor=monitor)

        offline_insert('groups', {'name': 'A', 'grade': '1'}, service=service)
        remote.ping.assert_not_called()
        remote.apply.assert_not_called()

        remote.ping.side_effect = OperationalError('down')
        monitor.last_checked_at = time.monotonic() - 61
        offline_insert('groups', {'name': 'B', 'grade': '1'}, service=service)
        offline_insert('groups', {'name': 'C', 'grade': '1'}, service=service)
        self.assertEqual(remote.ping.call_count, 1)
        self.assertFalse(monitor.is_online)
        self.assertEqual(self.queue.count_unsynced(), 3)

    def test_sync_without_due_recheck_reports_offline(self):
        remote = mock.Mock()
        service = SyncService(
            queue=self.queue, remote=remote, monitor=ConnectivityMonitor(remote=remote, online=False, recheck_interval=60),
        )
        report = service.sync_all()
        self.assertEqual(report.reason, REASON_OFFLINE)
        remote.ping.assert_not_called()


class SharedQueueTests(OfflineTestCase):
    def _op(self):
        return self.queue.enqueue('groups', 'insert', {
            'id': 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', 'name': 'Evening', 'grade': '1',
        })

    def test_claim_is_exclusive_until_replay_ends(self):
        op_id = self._op()
        self.assertTrue(self.queue.claim(op_id))
        self.assertFalse(OfflineQueue().claim(op_id))

        self.queue.record_failure(op_id, 'rejected')
        self.assertTrue(OfflineQueue().claim(op_id))

    def test_operation_claimed_by_another_worker_is_skipped(self):
        op_id = self._op()
        other_worker = SyncService(
            queue=OfflineQueue(), remote=RemoteStore(), monitor=ConnectivityMonitor(online=True),
        )
        self.assertTrue(other_worker.queue.claim(op_id))

        self.monitor.set_online(True)

        report = self.service.last_report
        self.assertEqual((report.success_count, report.fail_count, report.skipped_count), (0, 0, 1))
        op = OfflineOperation.objects.using('offline').get(pk=op_id)
        self.assertEqual(op.attempts, 0)
        self.assertEqual(op.last_error, '')
        self.assertFalse(Group.objects.filter(name='Evening').exists())

    def test_stale_claim_is_taken_over(self):
        op_id = self._op()
        OfflineOperation.objects.using('offline').filter(pk=op_id).update(
            claimed_at=timezone.now() - timedelta(hours=1),
        )
        self.monitor.set_online(True)
        self.assertEqual(self.service.last_report.success_count, 1)
        self.assertTrue(Group.objects.filter(name='Evening').exists())
        self.assertEqual(self.queue.count_unsynced(), 0)


class ConnectivityTests(TestCase):
    def test_listener_fires_once_per_transition(self):
        monitor = ConnectivityMonitor(online=False)
        listener = mock.Mock()
        monitor.add_reconnect_listener(listener)

        monitor.set_online(True)
        monitor.set_online(True)
        self.assertEqual(listener.call_count, 1)

        monitor.mark_offline()
        monitor.set_online(True)
        self.assertEqual(listener.call_count, 2)

    def test_failing_listener_does_not_break_transition(self):
        monitor = ConnectivityMonitor(online=False)
        monitor.add_reconnect_listener(mock.Mock(side_effect=RuntimeError('boom')))
        self.assertTrue(monitor.set_online(True))
        self.assertTrue(monitor.is_online)

    def test_failed_ping_goes_offline(self):
        remote = mock.Mock()
        remote.ping.side_effect = OperationalError('down')
        monitor = ConnectivityMonitor(remote=remote)
        self.assertFalse(monitor.probe())
        self.assertFalse(monitor.is_online)

        remote.ping.side_effect = None
        self.assertTrue(monitor.probe())
        self.assertTrue(monitor.is_online)


class OfflineApiTests(TestCase):
    databases = {"default", "offline"}

    def setUp(self):
        reset_sync_service()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            email="admin@center.test", password="pass123", full_name="Admin", role=User.ROLE_ADMIN,
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {AccessToken.for_user(self.admin)}")
        self.student = create_student(
            name='Hadi', grade=GradeLevel.objects.get(code='1'), parent_phone='01012345678',
        )

    def tearDown(self):
        reset_sync_service()

    def _payment(self):
        return {
            "table": "payments",
            "type": "insert",
            "payload": {"student": str(self.student.pk), "month": "2026-03", "amount": "200", "paid": True},
        }

    def test_online_write_returns_201(self):
        res = self.client.post("/api/offline/operations", self._payment(), format="json")
        self.assertEqual(res.status_code, 201)
        self.assertFalse(res.data['offline'])
        self.assertTrue(Payment.objects.filter(pk=res.data['id']).exists())

    def test_offline_write_returns_202_and_syncs(self):
        get_sync_service().monitor.mark_offline()
        res = self.client.post("/api/offline/operations", self._payment(), format="json")
        self.assertEqual(res.status_code, 202)
        self.assertTrue(res.data['offline'])

        status = self.client.get("/api/offline/status")
        self.assertEqual(status.data['pendingCount'], 1)
        self.assertFalse(status.data['online'])

        get_sync_service().monitor.set_online(True)
        self.assertTrue(Payment.objects.filter(pk=res.data['id']).exists())
        self.assertEqual(self.client.get("/api/offline/status").data['pendingCount'], 0)

    def test_frozen_student_write_returns_409(self):
        BlockStore.load().freeze(self.student, 'موقوف')
        res = self.client.post("/api/offline/operations", self._payment(), format="json")
        self.assertEqual(res.status_code, 409)
        self.assertFalse(Payment.objects.exists())

    def test_update_requires_id(self):
        body = {"table": "groups", "type": "update", "payload": {"name": "x"}}
        res = self.client.post("/api/offline/operations", body, format="json")
        self.assertEqual(res.status_code, 400)

    def test_operations_list_flags_stalled(self):
        service = get_sync_service()
        op_id = service.queue.enqueue('groups', 'update', {'id': 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', 'name': 'x'})
        for _ in range(3):
            service.queue.record_failure(op_id, 'rejected')

        res = self.client.get("/api/offline/operations")
        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data[0]['stalled'])

        res = self.client.post(f"/api/offline/operations/{op_id}/retry")
        self.assertEqual(res.status_code, 200)
        res = self.client.delete(f"/api/offline/operations/{op_id}")
        self.assertEqual(res.status_code, 204)

    def test_management_command_replays_queue(self):
        service = get_sync_service()
        service.queue.enqueue('groups', 'insert', {
            'id': 'a3c1b6f4-5d2e-4f7a-9b8c-1d2e3f4a5b6c', 'name': 'Evening', 'grade': '1',
        })
        out = StringIO()
        call_command('sync_offline_queue', stdout=out)
        self.assertIn('Synced 1', out.getvalue())
        self.assertTrue(Group.objects.filter(name='Evening').exists())
