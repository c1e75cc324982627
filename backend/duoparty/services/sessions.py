import random
import uuid
from typing import List, Optional, Tuple

from duoparty import events
from duoparty.errors import RoomFull, SessionNotFound, ValidationError
from duoparty.events import Outbound
from duoparty.records import Player, Session

MAX_PLAYERS = 2
SESSION_TYPES = ('local', 'online')


def generate_code() -> str:
    """Six digit numeric display code."""
    return str(random.randint(100000, 999999))


def new_session(name: str, session_type: str, password: Optional[str] = None) -> Session:
    if not name or not session_type:
        raise ValidationError('missing_parameters')
    if session_type not in SESSION_TYPES:
        raise ValidationError('invalid_type')
    return Session(
        room=str(uuid.uuid4()),
        code=generate_code(),
        name=name,
        is_online_mode=session_type == 'online',
        password=password or None,
    )


def merge_local_players(session: Session, host_name: str, guest_name: str, sid: str) -> Session:
    """Merge the two players of a shared-device room by username.

    Known usernames are reconnected, unknown ones appended with zero points,
    so replaying the same join never duplicates a player.
    """
    if host_name == guest_name:
        raise ValidationError('Players must have different usernames')
    incoming = [u for u in (host_name, guest_name) if session.find_player(u) is None]
    if len(session.players) + len(incoming) > MAX_PLAYERS:
        raise RoomFull('Room is full')

    host = session.find_player(host_name)
    if host is None:
        session.players.append(Player(username=host_name, socket_id=sid, is_host=True))
    else:
        host.socket_id = sid
        host.is_online = True

    guest = session.find_player(guest_name)
    if guest is None:
        session.players.append(Player(username=guest_name, socket_id=None, is_host=False))
    else:
        guest.is_online = True

    if session.current_game_id is None:
        session.status = 'in_game_selection_menu'
    return session


def add_online_player(session: Session, username: str, sid: str) -> Tuple[Player, bool]:
    """Add or reconnect a player on an online room; returns (player, is_new)."""
    existing = session.find_player(username)
    if existing is not None:
        existing.socket_id = sid
        existing.is_online = True
        return existing, False
    if len(session.players) >= MAX_PLAYERS:
        raise RoomFull('Room is full')
    player = Player(username=username, socket_id=sid, is_host=not session.players)
    session.players.append(player)
    return player, True


def mark_offline(session: Session, sid: str) -> bool:
    changed = False
    for p in session.players:
        if sid and p.socket_id == sid:
            p.socket_id = None
            p.is_online = False
            changed = True
    return changed


class SessionManager:
    def __init__(self, store, registry, scheduler, logger):
        self.store = store
        self.registry = registry
        self.scheduler = scheduler
        self.logger = logger

    def create(self, name: str, session_type: str, password: Optional[str] = None) -> Session:
        session = new_session(name, session_type, password)
        self.store.save(session=session)
        self.logger.info(f"[create] room={session.room} code={session.code} type={session_type}")
        return session

    def get(self, room_id: str) -> Session:
        session = self.store.get_session(room_id)
        if session is None:
            self.store.forget_lock(room_id)
            raise SessionNotFound('Session not found')
        return session

    def join_local(self, room_id: str, host_name: str, guest_name: str, sid: str) -> List[Outbound]:
        with self.store.room_lock(room_id):
            session = self.get(room_id)
            merge_local_players(session, host_name, guest_name, sid)
            self.scheduler.cancel(room_id)
            self.store.save(session=session)
        self.logger.info(f"[join] room={room_id} players={[p.username for p in session.players]}")
        return [events.to_room(room_id, events.LOCAL_PLAYERS_READY, session.to_dict())]

    def join_online(self, room_id: str, username: str, sid: str) -> List[Outbound]:
        with self.store.room_lock(room_id):
            session = self.get(room_id)
            player, is_new = add_online_player(session, username, sid)
            self.scheduler.cancel(room_id)
            self.store.save(session=session)
        self.logger.info(f"[join-online] room={room_id} user={username} new={is_new}")
        out = []
        if is_new:
            out.append(events.to_others(room_id, events.ONLINE_PLAYER_JOINED, {'player': player.to_dict()}))
        if len(session.players) == MAX_PLAYERS:
            out.append(events.to_room(room_id, events.ONLINE_PLAYERS_READY, {
                'player1': session.players[0].to_dict(),
                'player2': session.players[1].to_dict(),
            }))
        return out

    def leave(self, room_id: str) -> List[Outbound]:
        """Schedule cleanup once nobody is connected to the room."""
        self.get(room_id)
        if self.registry.count(room_id) == 0:
            self.scheduler.schedule(room_id)
        return []

    def disconnect(self, room_id: str, sid: str) -> None:
        with self.store.room_lock(room_id):
            session = self.store.get_session(room_id)
            if session is not None and mark_offline(session, sid):
                self.store.save(session=session)
            elif session is None:
                self.store.forget_lock(room_id)
        if session is not None and self.registry.count(room_id) == 0:
            self.scheduler.schedule(room_id)

    def purge(self, room_id: str) -> None:
        """Delete an idle room's session and its live game, if any."""
        with self.store.room_lock(room_id):
            session = self.store.get_session(room_id)
            game_id = session.current_game_id if session else None
            self.store.delete_room(room_id, game_id)
        self.store.forget_lock(room_id)
        self.logger.info(f"[cleanup] room={room_id} game={game_id} deleted")
