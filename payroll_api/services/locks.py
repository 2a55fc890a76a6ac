# payroll_api/services/locks.py
from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Dict, Hashable


class KeyedLock:
    """One mutex per key; generation of the same (employee, period) never interleaves in-process."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[Hashable, threading.Lock] = {}
        self._users: Dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable):
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._users[key] -= 1
                if not self._users[key]:
                    self._users.pop(key, None)
                    self._locks.pop(key, None)
