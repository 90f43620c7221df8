"""
Sync pass: replay unsynced operations against the primary store.

Operations are replayed one at a time in (timestamp, id) order. A failed
replay is recorded on the operation and does not stop the pass; only a lost
connection ends it early, leaving the rest for the next pass. Each operation
is claimed in the queue before replay, so workers sharing the queue never
replay the same operation twice.
"""
import logging
import threading
from dataclasses import dataclass
from typing import Optional

from django.db import InterfaceError, OperationalError
from django.utils import timezone

from .connectivity import ConnectivityMonitor
from .queue import OfflineQueue
from .remote import RemoteStore

logger = logging.getLogger(__name__)

CONNECTION_ERRORS = (OperationalError, InterfaceError)

REASON_OFFLINE = 'offline'
REASON_ALREADY_SYNCING = 'already_syncing'


@dataclass
class SyncReport:
    ran: bool
    success_count: int = 0
    fail_count: int = 0
    skipped_count: int = 0
    reason: str = ''

    def as_dict(self) -> dict:
        return {
            'ran': self.ran,
            'successCount': self.success_count,
            'failCount': self.fail_count,
            'skippedCount': self.skipped_count,
            'reason': self.reason,
        }


class SyncService:
    def __init__(self, queue=None, remote=None, monitor=None):
        self.queue = queue or OfflineQueue()
        self.remote = remote or RemoteStore()
        self.monitor = monitor or ConnectivityMonitor(remote=self.remote)
        self.monitor.add_reconnect_listener(self.sync_all)
        self.last_sync_at = None
        self.last_report: Optional[SyncReport] = None
        self._lock = threading.Lock()

    @property
    def is_syncing(self) -> bool:
        return self._lock.locked()

    def sync_all(self) -> SyncReport:
        if not self.monitor.is_online:
            previous_sync_at = self.last_sync_at
            if not self.monitor.recheck():
                return SyncReport(ran=False, reason=REASON_OFFLINE)
            # the reconnect listener has just run a pass
            if self.last_sync_at is not previous_sync_at:
                return self.last_report
        if not self._lock.acquire(blocking=False):
            logger.info('[sync] pass already running, skipped')
            return SyncReport(ran=False, reason=REASON_ALREADY_SYNCING)
        try:
            report = self._run_pass()
        finally:
            self._lock.release()
        self.last_sync_at = timezone.now()
        self.last_report = report
        return report

    def _run_pass(self) -> SyncReport:
        report = SyncReport(ran=True)
        snapshot = self.queue.list_unsynced(include_stalled=True)
        max_attempts = self.queue.max_attempts
        logger.info(f"[sync] starting pass over {len(snapshot)} operation(s)")

        for index, op in enumerate(snapshot):
            if op.attempts >= max_attempts:
                report.skipped_count += 1
                continue
            if not self.queue.claim(op.pk):
                logger.info(f"[sync] #{op.pk} is being replayed by another worker, skipped")
                report.skipped_count += 1
                continue
            try:
                self.remote.apply_operation(op)
            except CONNECTION_ERRORS as exc:
                logger.warning(f"[sync] connection lost at #{op.pk}: {exc}")
                self.queue.record_failure(op.pk, exc)
                report.fail_count += 1
                report.skipped_count += len(snapshot) - index - 1
                self.monitor.mark_offline()
                break
            except Exception as exc:
                logger.error(f"[sync] replay failed #{op.pk} {op.type} {op.table} id={op.entity_id}: {exc}")
                self.queue.record_failure(op.pk, exc)
                report.fail_count += 1
                continue
            self.queue.mark_synced(op.pk)
            report.success_count += 1

        purged = self.queue.purge_synced()
        logger.info(
            f"[sync] done success={report.success_count} failed={report.fail_count} "
            f"skipped={report.skipped_count} purged={purged}"
        )
        return report
