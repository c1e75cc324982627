"""Socket.IO event names and the outbound envelope managers hand to the gateway."""
from typing import Any, NamedTuple, Optional

# inbound
LOCAL_JOIN_ROOM = 'local:join-room'
LOCAL_START_GAME = 'local:start-game'
LOCAL_ANSWER = 'local:answer'
LOCAL_REPORT_QUESTION = 'local:report-question'
LOCAL_PLAYER_LEAVE = 'local:player-leave'
ONLINE_JOIN_ROOM = 'online:join-room'
GET_GAME_INFO = 'get:game-info'

# outbound
LOCAL_PLAYERS_READY = 'local:players-ready'
LOCAL_GAME_STARTED = 'local:game-started'
LOCAL_NEXT_ROUND = 'local:next-round'
LOCAL_UPDATE_SCORE = 'local:update-score'
LOCAL_END_GAME = 'local:end-game'
ONLINE_PLAYER_JOINED = 'online:player-joined'
ONLINE_PLAYERS_READY = 'online:players-ready'
GAME_INFO = 'response:game-info'

# errors, origin only
LOCAL_ERROR = 'local:error'
LOCAL_ERROR_JOIN = 'local:error_join-room'
LOCAL_ERROR_START = 'local:error_start-game'
ONLINE_ERROR_JOIN = 'online:error_join-room'


class Outbound(NamedTuple):
    """One emit. ``room=None`` targets the originating connection only."""
    event: str
    payload: Any
    room: Optional[str] = None
    skip_origin: bool = False


def to_room(room: str, event: str, payload: Any) -> Outbound:
    return Outbound(event, payload, room=room)


def to_others(room: str, event: str, payload: Any) -> Outbound:
    return Outbound(event, payload, room=room, skip_origin=True)


def to_origin(event: str, payload: Any) -> Outbound:
    return Outbound(event, payload)
