import threading
from typing import Dict, Optional, Set


class RoomRegistry:
    """Live connections per room, mirrored from the Socket.IO room joins.

    A connection belongs to at most one room; the last room it joined is
    remembered so a transport disconnect can run the leave flow.
    """

    def __init__(self):
        self._rooms: Dict[str, Set[str]] = {}
        self._sid_room: Dict[str, str] = {}
        self._lock = threading.Lock()

    def add(self, room: str, sid: str) -> Optional[str]:
        """Put ``sid`` in ``room``; returns the room it was in before, if different."""
        with self._lock:
            previous = self._sid_room.get(sid)
            if previous and previous != room:
                self._discard_locked(previous, sid)
            self._rooms.setdefault(room, set()).add(sid)
            self._sid_room[sid] = room
            return previous if previous != room else None

    def discard(self, sid: str) -> Optional[str]:
        """Drop ``sid``; returns the room it was in."""
        with self._lock:
            room = self._sid_room.pop(sid, None)
            if room:
                self._discard_locked(room, sid)
            return room

    def _discard_locked(self, room: str, sid: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(sid)
        if not members:
            self._rooms.pop(room, None)

    def room_of(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._sid_room.get(sid)

    def count(self, room: str) -> int:
        with self._lock:
            return len(self._rooms.get(room, ()))

    def connections(self, room: str) -> Set[str]:
        with self._lock:
            return set(self._rooms.get(room, ()))
