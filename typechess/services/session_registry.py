"""
At most one writer per game session.

The rules engine does read-modify-write on a game without any locking of its own.
Every request that changes a game runs inside `SessionRegistry.lock(name)`.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class _SessionLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    # writers holding or waiting for the lock
    users: int = 0


class SessionRegistry:
    """
    One lock per game name, shared by every writer currently holding or waiting for it.

    The entry is dropped when its last user leaves, so names that are no longer written to
    (deleted games, unknown names) do not pile up. An entry in use is never replaced.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, _SessionLock] = {}

    def _enter(self, name: str) -> _SessionLock:
        with self._guard:
            entry = self._locks.setdefault(name, _SessionLock())
            entry.users += 1
            return entry

    def _leave(self, name: str, entry: _SessionLock) -> None:
        with self._guard:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[name]

    @contextmanager
    def lock(self, name: str) -> Iterator[None]:
        entry = self._enter(name)
        try:
            with entry.lock:
                yield
        finally:
            self._leave(name, entry)

    def __contains__(self, name: str) -> bool:
        with self._guard:
            return name in self._locks

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
