from typing import Any, Dict, NamedTuple, Optional

from duoparty.errors import InvariantViolation
from duoparty.records import Game, Session


class RoundOutcome(NamedTuple):
    round: int
    answering_index: int
    awarded: int
    finished: bool
    next_question: Optional[Dict[str, Any]]


def answering_index(round_number: int) -> int:
    """Odd rounds are answered by the first player, even rounds by the second."""
    return (round_number - 1) % 2


def resolve_round(session: Session, game: Game, accepted: bool, round_limit: int) -> RoundOutcome:
    """Apply one judged round to ``session`` and ``game`` in place.

    The answering player gains the question's points when ``accepted``.
    A round with no question behind it (short draw) awards nothing and
    ends the game, as does moving past ``round_limit``.
    """
    played = game.current_round
    if not 1 <= played <= round_limit:
        raise InvariantViolation(f"round {played} outside 1..{round_limit}")
    idx = answering_index(played)
    question = game.question_at(played)

    awarded = 0
    if accepted and question is not None and idx < len(session.players):
        awarded = int(question.get('points') or 0)
        session.players[idx].points += awarded

    game.current_round = played + 1
    next_question = game.question_at(game.current_round)
    finished = question is None or game.current_round > round_limit or next_question is None
    return RoundOutcome(played, idx, awarded, finished, None if finished else next_question)
