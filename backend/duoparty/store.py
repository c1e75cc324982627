"""Redis-backed shared state store.

Two record kinds live under namespaced keys: ``session:{roomId}`` and
``game:{gameId}``. There are no cross-process transactions around reads,
so every read-modify-write of a room goes through ``room_lock`` and writes
for one operation are sent as a single MULTI/EXEC pipeline.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterable, Optional

import redis

from .errors import StoreUnavailable
from .records import Game, Session, dumps, loads_game, loads_session

SESSION_KEY = 'session:{room_id}'
GAME_KEY = 'game:{game_id}'


def session_key(room_id: str) -> str:
    return SESSION_KEY.format(room_id=room_id)


def game_key(game_id: str) -> str:
    return GAME_KEY.format(game_id=game_id)


def connect(url: str, timeout: float) -> redis.Redis:
    return redis.Redis.from_url(
        url,
        decode_responses=True,
        socket_timeout=timeout,
        socket_connect_timeout=timeout,
    )


class StateStore:
    def __init__(self, client: redis.Redis, logger=None):
        self.client = client
        self.logger = logger
        self._locks: Dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ---- key level ----

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(key)
        except redis.RedisError as exc:
            self._fail('get', key, exc)

    def set(self, key: str, value: str) -> None:
        self.commit({key: value})

    def delete(self, *keys: str) -> None:
        self.commit(deletes=keys)

    def commit(self, writes: Optional[Dict[str, str]] = None, deletes: Iterable[str] = ()) -> None:
        """Apply all writes and deletes in one transaction."""
        writes = writes or {}
        deletes = [k for k in deletes if k]
        if not writes and not deletes:
            return
        try:
            pipe = self.client.pipeline(transaction=True)
            for key, value in writes.items():
                pipe.set(key, value)
            if deletes:
                pipe.delete(*deletes)
            pipe.execute()
        except redis.RedisError as exc:
            self._fail('commit', ','.join(list(writes) + deletes), exc)

    def _fail(self, op: str, key: str, exc: Exception):
        if self.logger:
            self.logger.error(f"[store] {op} key={key} failed: {exc}")
        raise StoreUnavailable('State store unavailable') from exc

    # ---- records ----

    def get_session(self, room_id: str) -> Optional[Session]:
        raw = self.get(session_key(room_id))
        return loads_session(raw) if raw else None

    def get_game(self, game_id: str) -> Optional[Game]:
        raw = self.get(game_key(game_id))
        return loads_game(raw) if raw else None

    def save(self, session: Optional[Session] = None, game: Optional[Game] = None,
             delete_game_id: Optional[str] = None) -> None:
        writes = {}
        if session is not None:
            writes[session_key(session.room)] = dumps(session)
        if game is not None:
            writes[game_key(game.id)] = dumps(game)
        deletes = [game_key(delete_game_id)] if delete_game_id else []
        self.commit(writes, deletes)

    def delete_room(self, room_id: str, game_id: Optional[str] = None) -> None:
        keys = [session_key(room_id)]
        if game_id:
            keys.append(game_key(game_id))
        self.commit(deletes=keys)

    # ---- in-process serialization ----

    @contextmanager
    def room_lock(self, room_id: str):
        with self._locks_guard:
            lock = self._locks.setdefault(room_id, threading.RLock())
        with lock:
            yield

    def forget_lock(self, room_id: str) -> None:
        with self._locks_guard:
            self._locks.pop(room_id, None)
