from flask import request
from flask_socketio import join_room, leave_room

from duoparty import events
from duoparty.errors import DuoPartyError, ValidationError
from duoparty.registry import RoomRegistry
from duoparty.services.games import GameManager
from duoparty.services.scheduler import CleanupScheduler
from duoparty.services.sessions import SessionManager


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _username(player):
    if isinstance(player, dict):
        name = player.get('username')
        return name.strip() if isinstance(name, str) and name.strip() else None
    return None


def _optional_round(data):
    value = data.get('round')
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError('Invalid parameters')
    return value


class Gateway:
    """Socket.IO entry point: validates events, runs the lifecycle managers
    and fans the resulting events out to the room.

    Owns the process-scoped room registry and cleanup timers and injects
    them into the managers.
    """

    def __init__(self, socketio, store, question_bank, logger, namespace='/',
                 grace_sec=60, questions_per_game=20, round_limit=20, spawn=None):
        self.socketio = socketio
        self.namespace = namespace
        self.logger = logger
        self.question_bank = question_bank
        self.registry = RoomRegistry()
        self.sessions = SessionManager(store, self.registry, None, logger)
        self.scheduler = CleanupScheduler(
            grace_sec,
            on_expire=self.sessions.purge,
            has_connections=lambda room: self.registry.count(room) > 0,
            spawn=spawn or socketio.start_background_task,
            logger=logger,
        )
        self.sessions.scheduler = self.scheduler
        self.games = GameManager(store, question_bank, logger,
                                 questions_per_game=questions_per_game, round_limit=round_limit)

    # ---- plumbing ----

    def _run(self, error_event, action):
        """Run ``action(sid)`` and emit its events; failures only reach the origin."""
        sid = _get_sid()
        try:
            outbound = action(sid) or []
        except DuoPartyError as exc:
            self.logger.info(f"[error] event={error_event} sid={sid} {type(exc).__name__}: {exc.message}")
            self._emit_origin(error_event, exc.message, sid)
            return
        except Exception:
            self.logger.exception(f"[error] event={error_event} sid={sid} unexpected failure")
            self._emit_origin(error_event, 'Internal error', sid)
            return
        self._dispatch(outbound, sid)

    def _dispatch(self, outbound, sid):
        for ev in outbound:
            if ev.room is None:
                self._emit_origin(ev.event, ev.payload, sid)
            else:
                self.socketio.emit(ev.event, ev.payload, to=ev.room, namespace=self.namespace,
                                   skip_sid=sid if ev.skip_origin else None)

    def _emit_origin(self, event, payload, sid):
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def _enter(self, room_id, sid):
        previous = self.registry.add(room_id, sid)
        if previous:
            leave_room(previous)
        join_room(room_id)

    # ---- handlers ----

    def handle_connect(self, auth=None):
        self.logger.info(f"[connect] sid={_get_sid()}")

    def handle_disconnect(self, reason=None):
        sid = _get_sid()
        room_id = self.registry.discard(sid)
        self.logger.info(f"[disconnect] sid={sid} room={room_id}")
        if not room_id:
            return
        try:
            self.sessions.disconnect(room_id, sid)
        except Exception:
            self.logger.exception(f"[disconnect] sid={sid} room={room_id} leave flow failed")

    def handle_local_join(self, data=None):
        data = data or {}

        def action(sid):
            room_id = data.get('roomId')
            host, guest = _username(data.get('player1')), _username(data.get('player2'))
            if not room_id or not host or not guest:
                raise ValidationError('roomId or players missing')
            outbound = self.sessions.join_local(room_id, host, guest, sid)
            # only a successful join subscribes the connection to the room
            self._enter(room_id, sid)
            return outbound

        self._run(events.LOCAL_ERROR_JOIN, action)

    def handle_online_join(self, data=None):
        data = data or {}

        def action(sid):
            room_id = data.get('roomId')
            username = _username(data.get('player'))
            if not room_id or not username:
                raise ValidationError('roomId or player missing')
            outbound = self.sessions.join_online(room_id, username, sid)
            self._enter(room_id, sid)
            return outbound

        self._run(events.ONLINE_ERROR_JOIN, action)

    def handle_start_game(self, data=None):
        data = data or {}

        def action(sid):
            mode, room_id = data.get('mode'), data.get('roomId')
            if not mode or not room_id:
                raise ValidationError('mode or roomId missing')
            return self.games.start(room_id, mode)

        self._run(events.LOCAL_ERROR_START, action)

    def handle_answer(self, data=None):
        data = data or {}

        def action(sid):
            game_id, accepted = data.get('gameId'), data.get('accepted')
            if not game_id or not isinstance(accepted, bool):
                raise ValidationError('Invalid parameters')
            return self.games.answer(game_id, accepted, expected_round=_optional_round(data))

        self._run(events.LOCAL_ERROR, action)

    def handle_report_question(self, data=None):
        data = data or {}

        def action(sid):
            game_id, question_id = data.get('gameId'), data.get('questionId')
            if not game_id or not question_id:
                raise ValidationError('gameId or questionId missing')
            return self.games.report(game_id, question_id)

        self._run(events.LOCAL_ERROR, action)

    def handle_player_leave(self, data=None):
        data = data or {}

        def action(sid):
            room_id = data.get('roomId')
            if not room_id:
                raise ValidationError('roomId missing')
            if self.registry.room_of(sid) == room_id:
                self.registry.discard(sid)
                leave_room(room_id)
            self.logger.info(f"[leave] room={room_id} sid={sid} remaining={self.registry.count(room_id)}")
            return self.sessions.leave(room_id)

        self._run(events.LOCAL_ERROR, action)

    def handle_game_info(self, data=None):
        self._run(events.LOCAL_ERROR, lambda sid: [
            events.to_origin(events.GAME_INFO, {'totalQuestions': self.question_bank.count()})
        ])


def register_socketio_handlers(gateway: Gateway) -> None:
    """Bind the gateway's handlers on its namespace."""
    ns = gateway.namespace
    gateway.socketio.on_event('connect', gateway.handle_connect, namespace=ns)
    gateway.socketio.on_event('disconnect', gateway.handle_disconnect, namespace=ns)
    gateway.socketio.on_event(events.LOCAL_JOIN_ROOM, gateway.handle_local_join, namespace=ns)
    gateway.socketio.on_event(events.ONLINE_JOIN_ROOM, gateway.handle_online_join, namespace=ns)
    gateway.socketio.on_event(events.LOCAL_START_GAME, gateway.handle_start_game, namespace=ns)
    gateway.socketio.on_event(events.LOCAL_ANSWER, gateway.handle_answer, namespace=ns)
    gateway.socketio.on_event(events.LOCAL_REPORT_QUESTION, gateway.handle_report_question, namespace=ns)
    gateway.socketio.on_event(events.LOCAL_PLAYER_LEAVE, gateway.handle_player_leave, namespace=ns)
    gateway.socketio.on_event(events.GET_GAME_INFO, gateway.handle_game_info, namespace=ns)
