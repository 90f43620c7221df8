"""
Connectivity state of the primary store.

Reconnect listeners fire once per offline -> online transition, never while
the state stays online. While offline, recheck() pings the primary store at
most once per OFFLINE_RECHECK_SECONDS so the next write or sync pass can
bring the state back online.
"""
import logging
import threading
import time

from django.conf import settings
from django.db import DatabaseError

logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    def __init__(self, remote=None, online=True, recheck_interval=None):
        self.remote = remote
        self._online = online
        self._listeners = []
        self._lock = threading.Lock()
        self._recheck_interval = recheck_interval
        # monotonic clock; None until the first offline check
        self.last_checked_at = None if online else time.monotonic()

    @property
    def is_online(self) -> bool:
        return self._online

    @property
    def recheck_interval(self) -> float:
        if self._recheck_interval is not None:
            return self._recheck_interval
        return settings.OFFLINE_RECHECK_SECONDS

    def add_reconnect_listener(self, listener):
        self._listeners.append(listener)

    def set_online(self, online) -> bool:
        """Returns True when this call moved the state from offline to online."""
        with self._lock:
            was_online = self._online
            self._online = online
            if not online and was_online:
                self.last_checked_at = time.monotonic()
        if online and not was_online:
            logger.info('[connectivity] back online')
            for listener in list(self._listeners):
                try:
                    listener()
                except Exception:
                    logger.exception('[connectivity] reconnect listener failed')
            return True
        if not online and was_online:
            logger.warning('[connectivity] primary store unreachable, switching to offline mode')
        return False

    def mark_offline(self):
        self.set_online(False)

    def probe(self) -> bool:
        with self._lock:
            self.last_checked_at = time.monotonic()
        try:
            self.remote.ping()
        except DatabaseError as exc:
            logger.debug(f"[connectivity] primary store still unreachable: {exc}")
            self.set_online(False)
            return False
        self.set_online(True)
        return True

    def recheck(self) -> bool:
        """
        Throttled reconnect check on the write and sync paths. Online: no-op.
        Offline: ping unless the last check is younger than recheck_interval.
        Returns the resulting online state.
        """
        if self._online:
            return True
        if self.remote is None:
            return False
        with self._lock:
            last = self.last_checked_at
            if last is not None and time.monotonic() - last < self.recheck_interval:
                return False
        return self.probe()
