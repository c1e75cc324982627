import itertools
import threading
import time
from typing import Callable, Dict, Optional, Tuple


class CleanupScheduler:
    """Delete idle rooms after a grace period.

    - At most one pending timer per room; scheduling again replaces it
    - ``cancel`` returns the room to active and is a no-op once fired
    - A timer fires only if it is still the room's pending one and the
      room has no live connections left
    """

    def __init__(self, grace_sec: float, on_expire: Callable[[str], None],
                 has_connections: Callable[[str], bool], spawn: Callable, logger,
                 sleep: Callable[[float], None] = time.sleep, clock: Callable[[], float] = time.time):
        self.grace_sec = grace_sec
        self.on_expire = on_expire
        self.has_connections = has_connections
        self.spawn = spawn
        self.sleep = sleep
        self.clock = clock
        self.logger = logger
        self._pending: Dict[str, Tuple[int, float]] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def schedule(self, room: str) -> float:
        deadline = self.clock() + self.grace_sec
        with self._lock:
            token = next(self._tokens)
            replaced = room in self._pending
            self._pending[room] = (token, deadline)
        self.logger.info(
            f"[cleanup-set] room={room} grace={self.grace_sec}s deadline={deadline}"
            + (" (replaced)" if replaced else "")
        )
        self.spawn(self._runner, room, token, deadline)
        return deadline

    def cancel(self, room: str) -> bool:
        with self._lock:
            entry = self._pending.pop(room, None)
        if entry:
            self.logger.info(f"[cleanup-cancel] room={room}")
        return entry is not None

    def is_pending(self, room: str) -> bool:
        with self._lock:
            return room in self._pending

    def deadline(self, room: str) -> Optional[float]:
        with self._lock:
            entry = self._pending.get(room)
        return entry[1] if entry else None

    def _runner(self, room: str, token: int, deadline: float) -> None:
        sleep_for = max(0.0, deadline - self.clock())
        if sleep_for:
            self.sleep(sleep_for)
        with self._lock:
            entry = self._pending.get(room)
            if not entry or entry[0] != token:
                return
            del self._pending[room]
        if self.has_connections(room):
            self.logger.info(f"[cleanup-abort] room={room} has live connections")
            return
        self.logger.info(f"[cleanup-fire] room={room}")
        try:
            self.on_expire(room)
        except Exception:
            self.logger.exception(f"[cleanup-fire] room={room} failed")
