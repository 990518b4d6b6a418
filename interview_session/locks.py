"""Process-wide locks serialising mutations per session and per user.

Locks are held weakly: an entry lives only while some caller still holds or
waits on it, so finished sessions and idle users leave nothing behind.
"""
from __future__ import annotations

import threading
import weakref

_SESSION_LOCKS: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_USER_LOCKS: "weakref.WeakValueDictionary[str, threading.RLock]" = weakref.WeakValueDictionary()
_LOCKS_GUARD = threading.Lock()


def _lock_in(table: "weakref.WeakValueDictionary[str, threading.RLock]", key: str) -> threading.RLock:
    with _LOCKS_GUARD:
        lock = table.get(key)
        if lock is None:
            lock = threading.RLock()
            table[key] = lock
    return lock


def session_lock(session_id: str) -> threading.RLock:
    return _lock_in(_SESSION_LOCKS, session_id)


def user_lock(user_id: str) -> threading.RLock:
    return _lock_in(_USER_LOCKS, user_id)


__all__ = ["session_lock", "user_lock"]
