"""Database-backed Quiz Store and Result Archive."""
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from livequiz import db
from livequiz.errors import PersistenceFailure, QuizNotFound
from livequiz.models import GameResult, PlayerResult, Question, Quiz


class QuizStore:

    def create(self, data: dict, default_time_limit: int = 20) -> dict:
        """Persist a validated quiz definition and return its JSON form."""
        quiz = Quiz(title=data['title'])
        for position, q in enumerate(data.get('questions') or []):
            quiz.questions.append(Question(
                position=position,
                text=q['text'],
                options=list(q['options']),
                correct_option_index=int(q['correct_option_index']),
                time_limit=int(q.get('time_limit') or default_time_limit),
            ))
        try:
            db.session.add(quiz)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceFailure(str(exc)) from exc
        return quiz.to_dict()

    def list(self) -> List[dict]:
        try:
            quizzes = Quiz.query.order_by(Quiz.created_at.desc(), Quiz.id.desc()).all()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceFailure(str(exc)) from exc
        return [q.to_dict(include_questions=False) for q in quizzes]

    def get_by_id(self, quiz_id) -> Optional[dict]:
        try:
            quiz = db.session.get(Quiz, int(quiz_id))
        except (TypeError, ValueError):
            return None
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceFailure(str(exc)) from exc
        return quiz.to_dict() if quiz else None

    def load(self, quiz_id) -> dict:
        quiz = self.get_by_id(quiz_id)
        if quiz is None:
            raise QuizNotFound(quiz_id)
        return quiz


class ResultArchive:

    def save(self, record: dict) -> dict:
        """Persist ``{quiz_ref, code, players}`` for a finished session."""
        quiz_ref = record.get('quiz_ref')
        try:
            quiz_id = int(quiz_ref) if quiz_ref is not None else None
        except (TypeError, ValueError):
            quiz_id = None
        result = GameResult(quiz_id=quiz_id, code=record['code'])
        for position, p in enumerate(record.get('players') or []):
            result.players.append(PlayerResult(position=position, name=p['name'], score=int(p['score'])))
        try:
            db.session.add(result)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceFailure(str(exc)) from exc
        return result.to_dict()

    def list_for_quiz(self, quiz_id) -> List[dict]:
        try:
            results = (
                GameResult.query.filter_by(quiz_id=int(quiz_id))
                .order_by(GameResult.played_at.desc(), GameResult.id.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise PersistenceFailure(str(exc)) from exc
        return [r.to_dict() for r in results]
