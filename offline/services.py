"""
Process-wide sync service and queue status.
"""
import threading

from .sync import SyncService

_service = None
_service_lock = threading.Lock()


def get_sync_service() -> SyncService:
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = SyncService()
    return _service


def reset_sync_service():
    global _service
    with _service_lock:
        _service = None


def queue_status(service=None) -> dict:
    service = service or get_sync_service()
    queue = service.queue
    return {
        'online': service.monitor.is_online,
        'syncing': service.is_syncing,
        'pendingCount': queue.count_unsynced(),
        'stalledCount': len(queue.stalled()),
        'maxAttempts': queue.max_attempts,
        'lastSyncAt': service.last_sync_at,
        'lastReport': service.last_report.as_dict() if service.last_report else None,
    }
