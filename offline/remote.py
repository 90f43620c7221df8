"""
Primary store access for queued operations.
"""
from django.db import connections, transaction

from .entities import handler_for


class RemoteStore:
    def __init__(self, using='default'):
        self.using = using

    def apply(self, table, kind, payload):
        """Apply one write inside a savepoint; raises on any rejection."""
        handler = handler_for(table)
        with transaction.atomic(using=self.using):
            return handler.apply(kind, payload, using=self.using)

    def apply_operation(self, op):
        return self.apply(op.table, op.type, op.payload)

    def ping(self):
        with connections[self.using].cursor() as cursor:
            cursor.execute('SELECT 1')
