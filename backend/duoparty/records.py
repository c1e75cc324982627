"""Session, Player and Game records kept in the shared state store.

Records round-trip through ``to_dict``/``from_dict`` using the camelCase
field names the front-end reads.
"""
import json
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SESSION_STATUSES = ('waiting', 'in_game_selection_menu', 'in_game', 'ended')


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class Player:
    username: str
    socket_id: Optional[str] = None
    is_host: bool = False
    is_online: bool = True
    points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'username': self.username,
            'socketId': self.socket_id,
            'isHost': self.is_host,
            'isOnline': self.is_online,
            'points': self.points,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Player':
        return cls(
            username=data['username'],
            socket_id=data.get('socketId'),
            is_host=bool(data.get('isHost', False)),
            is_online=bool(data.get('isOnline', False)),
            points=int(data.get('points') or 0),
        )


@dataclass
class Session:
    room: str
    code: str
    name: str
    is_online_mode: bool = False
    password: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    used_questions: List[str] = field(default_factory=list)
    status: str = 'waiting'
    current_game_id: Optional[str] = None
    created_at: int = field(default_factory=now_ms)

    def find_player(self, username: str) -> Optional[Player]:
        for p in self.players:
            if p.username == username:
                return p
        return None

    def mark_used(self, question_ids) -> None:
        """Append ids not drawn before; the list only ever grows."""
        seen = set(self.used_questions)
        for qid in question_ids:
            if qid not in seen:
                self.used_questions.append(qid)
                seen.add(qid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'room': self.room,
            'code': self.code,
            'name': self.name,
            'players': [p.to_dict() for p in self.players],
            'isOnlineMode': self.is_online_mode,
            'password': self.password,
            'usedQuestions': list(self.used_questions),
            'status': self.status,
            'currentGameId': self.current_game_id,
            'createdAt': self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Session':
        return cls(
            room=data['room'],
            code=str(data['code']),
            name=data['name'],
            is_online_mode=bool(data.get('isOnlineMode', False)),
            password=data.get('password'),
            players=[Player.from_dict(p) for p in data.get('players') or []],
            used_questions=list(data.get('usedQuestions') or []),
            status=data.get('status') or 'waiting',
            current_game_id=data.get('currentGameId'),
            created_at=int(data.get('createdAt') or 0),
        )


@dataclass
class Game:
    id: str
    mode: str
    room_id: str
    questions: List[Dict[str, Any]] = field(default_factory=list)
    current_round: int = 1
    started_at: int = field(default_factory=now_ms)

    @classmethod
    def new(cls, mode: str, room_id: str, questions: List[Dict[str, Any]]) -> 'Game':
        return cls(id=str(uuid.uuid4()), mode=mode, room_id=room_id, questions=list(questions))

    def question_at(self, round_number: int) -> Optional[Dict[str, Any]]:
        """Question for a 1-based round, or None past the drawn list."""
        if 1 <= round_number <= len(self.questions):
            return self.questions[round_number - 1]
        return None

    @property
    def current_question(self) -> Optional[Dict[str, Any]]:
        return self.question_at(self.current_round)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'mode': self.mode,
            'roomId': self.room_id,
            'startedAt': self.started_at,
            'currentRound': self.current_round,
            'questions': list(self.questions),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Game':
        return cls(
            id=data['id'],
            mode=data['mode'],
            room_id=data['roomId'],
            questions=list(data.get('questions') or []),
            current_round=int(data.get('currentRound') or 1),
            started_at=int(data.get('startedAt') or 0),
        )


def dumps(record) -> str:
    return json.dumps(record.to_dict())


def loads_session(raw: str) -> Session:
    return Session.from_dict(json.loads(raw))


def loads_game(raw: str) -> Game:
    return Game.from_dict(json.loads(raw))
