"""
Offline queue access. Every read-modify-write runs in a transaction on the
offline database so an operation is never processed twice. A worker claims
an operation before replaying it; the claim is a conditional UPDATE, so of
several workers sharing the queue file exactly one gets each operation.
"""
import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone

from .entities import OperationType, get_kind
from .models import OfflineOperation

logger = logging.getLogger(__name__)


class OfflineQueue:
    def __init__(self, using='offline', max_attempts=None):
        self.using = using
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts or settings.OFFLINE_QUEUE_MAX_ATTEMPTS

    @property
    def objects(self):
        return OfflineOperation.objects.using(self.using)

    def enqueue(self, table, kind, payload) -> int:
        table = get_kind(table)
        kind = OperationType(kind)
        op = self.objects.create(table=table, type=kind, payload=payload)
        logger.info(f"[queue] enqueued #{op.pk} {kind} {table} id={payload.get('id')}")
        return op.pk

    def _unsynced(self):
        return self.objects.filter(synced=False).order_by('timestamp', 'id')

    def list_unsynced(self, include_stalled=False):
        qs = self._unsynced()
        if not include_stalled:
            qs = qs.filter(attempts__lt=self.max_attempts)
        return list(qs)

    def count_unsynced(self) -> int:
        return self._unsynced().count()

    def stalled(self):
        """Operations that hit the attempt cap and wait for a manual retry or discard."""
        return list(self._unsynced().filter(attempts__gte=self.max_attempts))

    def claim(self, op_id) -> bool:
        """
        Take an unsynced operation for replay. Fails when another worker holds
        a claim younger than OFFLINE_CLAIM_TIMEOUT_SECONDS.
        """
        now = timezone.now()
        stale_before = now - timedelta(seconds=settings.OFFLINE_CLAIM_TIMEOUT_SECONDS)
        updated = self.objects.filter(pk=op_id, synced=False).filter(
            Q(claimed_at__isnull=True) | Q(claimed_at__lt=stale_before)
        ).update(claimed_at=now)
        return updated == 1

    def mark_synced(self, op_id) -> bool:
        with transaction.atomic(using=self.using):
            op = self.objects.select_for_update().filter(pk=op_id, synced=False).first()
            if op is None:
                return False
            op.synced = True
            op.last_attempt_at = timezone.now()
            op.claimed_at = None
            op.save(update_fields=['synced', 'last_attempt_at', 'claimed_at'])
        return True

    def record_failure(self, op_id, error) -> None:
        with transaction.atomic(using=self.using):
            self.objects.filter(pk=op_id, synced=False).update(
                attempts=F('attempts') + 1,
                last_error=str(error)[:2000],
                last_attempt_at=timezone.now(),
                claimed_at=None,
            )

    def purge_synced(self) -> int:
        deleted, _ = self.objects.filter(synced=True).delete()
        return deleted

    def retry(self, op_id) -> bool:
        updated = self.objects.filter(pk=op_id, synced=False).update(attempts=0, last_error='', claimed_at=None)
        if updated:
            logger.info(f"[queue] #{op_id} released for retry")
        return bool(updated)

    def discard(self, op_id) -> bool:
        deleted, _ = self.objects.filter(pk=op_id, synced=False).delete()
        if deleted:
            logger.warning(f"[queue] #{op_id} discarded without replay")
        return bool(deleted)
