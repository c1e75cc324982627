"""Question bank and game-mode catalog backed by the relational store."""
from typing import Iterable, List, Optional

from sqlalchemy import func

from duoparty import db
from duoparty.models import GameMode, Question, QuestionReport


class QuestionBank:
    def fetch_questions(self, mode: str, exclude_ids: Iterable[str], limit: int) -> List[dict]:
        """Up to ``limit`` random questions of ``mode`` whose ids are not excluded."""
        query = Question.query.filter(Question.mode == mode)
        exclude_ids = list(exclude_ids)
        if exclude_ids:
            query = query.filter(~Question.id.in_(exclude_ids))
        return [q.to_dict() for q in query.order_by(func.random()).limit(limit).all()]

    def count(self) -> int:
        return Question.query.count()

    def list_game_modes(self) -> List[dict]:
        return [m.to_dict() for m in GameMode.query.order_by(GameMode.name).all()]

    def report(self, question_id: str, game_id: Optional[str] = None,
               room_id: Optional[str] = None, round_number: Optional[int] = None) -> QuestionReport:
        report = QuestionReport(question_id=question_id, game_id=game_id, room_id=room_id, round=round_number)
        try:
            db.session.add(report)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return report
