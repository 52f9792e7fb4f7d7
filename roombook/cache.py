"""Process-wide room listing cache.

Held on ``app.state`` and handed to routers as a dependency. Room writes
call :meth:`RoomCache.invalidate`.
"""

from __future__ import annotations

from threading import Lock
from typing import Any, Callable


class RoomCache:
    def __init__(self) -> None:
        self._lock = Lock()
        self._rooms: list[Any] | None = None

    def get_or_load(self, loader: Callable[[], list[Any]]) -> list[Any]:
        with self._lock:
            if self._rooms is None:
                self._rooms = list(loader())
            return list(self._rooms)

    def invalidate(self) -> None:
        with self._lock:
            self._rooms = None

    @property
    def is_warm(self) -> bool:
        return self._rooms is not None
