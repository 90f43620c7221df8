"""
Durable queue of writes waiting to reach the primary store.
Stored in the local 'offline' database (see config.routers).
"""
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models
from django.utils import timezone

from .entities import EntityKind, OperationType


class OfflineOperation(models.Model):
    """
    One pending insert/update/delete. Replayed in (timestamp, id) order;
    payload always carries the entity id.
    """
    table = models.CharField(max_length=50, choices=EntityKind.choices)
    type = models.CharField(max_length=10, choices=OperationType.choices)
    payload = models.JSONField(encoder=DjangoJSONEncoder)
    timestamp = models.DateTimeField(default=timezone.now, db_index=True)
    synced = models.BooleanField(default=False)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True, default='')
    last_attempt_at = models.DateTimeField(null=True, blank=True)
    # set by the worker replaying the operation; cleared when the replay ends
    claimed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'offline_operations'
        verbose_name = 'Offline Operation'
        verbose_name_plural = 'Offline Operations'
        ordering = ['timestamp', 'id']
        indexes = [
            models.Index(fields=['synced', 'timestamp'], name='offline_ops_synced_ts_idx'),
        ]

    def __str__(self):
        return f"#{self.pk} {self.type} {self.table} {self.entity_id}"

    @property
    def entity_id(self):
        return (self.payload or {}).get('id')
