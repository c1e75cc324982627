from typing import List, Optional

from duoparty import events
from duoparty.errors import GameNotFound, InvariantViolation, SessionNotFound, StaleRound, ValidationError
from duoparty.events import Outbound
from duoparty.records import Game
from .scoring import RoundOutcome, answering_index, resolve_round


class GameManager:
    def __init__(self, store, question_bank, logger, questions_per_game: int = 20, round_limit: int = 20):
        self.store = store
        self.question_bank = question_bank
        self.logger = logger
        self.questions_per_game = questions_per_game
        self.round_limit = round_limit

    def get(self, game_id: str) -> Game:
        game = self.store.get_game(game_id)
        if game is None:
            raise GameNotFound('Game not found')
        return game

    def start(self, room_id: str, mode: str) -> List[Outbound]:
        with self.store.room_lock(room_id):
            session = self.store.get_session(room_id)
            if session is None:
                self.store.forget_lock(room_id)
                raise SessionNotFound('Session not found')

            questions = self.question_bank.fetch_questions(mode, set(session.used_questions), self.questions_per_game)
            session.mark_used(q['id'] for q in questions)
            game = Game.new(mode, room_id, questions)

            previous_game_id = session.current_game_id
            session.status = 'in_game'
            session.current_game_id = game.id
            self.store.save(session=session, game=game, delete_game_id=previous_game_id)

        if len(questions) < self.questions_per_game:
            self.logger.warning(f"[start] room={room_id} mode={mode} only {len(questions)} unused questions left")
        self.logger.info(f"[start] room={room_id} game={game.id} mode={mode} questions={len(questions)}")
        return [events.to_room(room_id, events.LOCAL_GAME_STARTED, {'gameId': game.id})]

    def answer(self, game_id: str, accepted, expected_round: Optional[int] = None) -> List[Outbound]:
        if not isinstance(accepted, bool):
            raise ValidationError('Invalid parameters')
        room_id = self.get(game_id).room_id

        with self.store.room_lock(room_id):
            # re-read under the lock, the game may have moved on meanwhile
            game = self.get(game_id)
            session = self.store.get_session(room_id)
            if session is None:
                self.store.forget_lock(room_id)
                raise SessionNotFound('Session not found')
            if expected_round is not None and expected_round != game.current_round:
                raise StaleRound(f'Round {expected_round} already resolved')

            try:
                outcome = resolve_round(session, game, accepted, self.round_limit)
            except InvariantViolation as exc:
                self.logger.warning(f"[answer] game={game.id} {exc.message}, ending game")
                outcome = RoundOutcome(game.current_round, answering_index(game.current_round), 0, True, None)
            if outcome.finished:
                session.current_game_id = None
                session.status = 'in_game_selection_menu'
                self.store.save(session=session, delete_game_id=game.id)
            else:
                self.store.save(session=session, game=game)

        self.logger.info(
            f"[answer] game={game.id} round={outcome.round} player={outcome.answering_index} "
            f"accepted={accepted} awarded={outcome.awarded}"
        )
        players = [p.to_dict() for p in session.players]
        out = [events.to_room(room_id, events.LOCAL_UPDATE_SCORE, {'players': players})]
        if outcome.finished:
            self.logger.info(f"[end] game={game.id} room={room_id} finished at round={outcome.round}")
            out.append(events.to_room(room_id, events.LOCAL_END_GAME, {'players': players}))
        else:
            out.append(events.to_room(room_id, events.LOCAL_NEXT_ROUND, {
                'currentRound': game.current_round,
                'question': outcome.next_question,
            }))
        return out

    def report(self, game_id: str, question_id: str) -> List[Outbound]:
        """Flag a question for moderation.

        Audit only: the reporting client rejects the round itself with a
        follow-up ``answer(false)``.
        """
        game = self.get(game_id)
        self.logger.warning(
            f"[report] game={game.id} room={game.room_id} question={question_id} round={game.current_round}"
        )
        self.question_bank.report(question_id, game_id=game.id, room_id=game.room_id, round_number=game.current_round)
        return []
