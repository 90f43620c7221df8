"""
Offline-aware writes.

Online: write straight to the primary store; if that fails for any reason
the operation is queued instead. Offline: recheck the primary store when a
check is due, otherwise queue immediately. Either way the caller gets a
WriteResult and the write is never lost.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from django.db import InterfaceError, OperationalError

from .entities import OperationType, get_kind
from .services import get_sync_service

logger = logging.getLogger(__name__)


@dataclass
class WriteResult:
    success: bool
    offline: bool
    id: Optional[str] = None
    error: str = ''


def _write(table, kind, payload, service=None) -> WriteResult:
    table = get_kind(table)
    service = service or get_sync_service()
    entity_id = str(payload['id'])

    # offline: a due reconnect check replays the queue before this write
    if service.monitor.is_online or service.monitor.recheck():
        try:
            service.remote.apply(table, kind, payload)
            return WriteResult(success=True, offline=False, id=entity_id)
        except (OperationalError, InterfaceError) as exc:
            logger.warning(f"[offline] primary store unreachable during {kind} {table}: {exc}")
            service.monitor.mark_offline()
            error = str(exc)
        except Exception as exc:
            logger.warning(f"[offline] {kind} {table} id={entity_id} failed online, queued: {exc}")
            error = str(exc)
    else:
        error = ''

    service.queue.enqueue(table, kind, payload)
    return WriteResult(success=True, offline=True, id=entity_id, error=error)


def offline_insert(table, payload, service=None) -> WriteResult:
    payload = dict(payload)
    if not payload.get('id'):
        payload['id'] = str(uuid.uuid4())
    return _write(table, OperationType.INSERT, payload, service)


def offline_update(table, entity_id, changes, service=None) -> WriteResult:
    payload = {**changes, 'id': str(entity_id)}
    return _write(table, OperationType.UPDATE, payload, service)


def offline_delete(table, entity_id, service=None) -> WriteResult:
    return _write(table, OperationType.DELETE, {'id': str(entity_id)}, service)
