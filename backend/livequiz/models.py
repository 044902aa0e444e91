from datetime import datetime, timezone

from livequiz import db

PLAYER_NAME_MAX_LENGTH = 64


def _utcnow():
    return datetime.now(timezone.utc)


class Quiz(db.Model):
    __tablename__ = 'quiz'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    questions = db.relationship(
        'Question',
        back_populates='quiz',
        order_by='Question.position',
        cascade='all, delete-orphan',
    )

    def to_dict(self, include_questions=True):
        data = {
            'id': self.id,
            'title': self.title,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'question_count': len(self.questions),
        }
        if include_questions:
            data['questions'] = [q.to_dict() for q in self.questions]
        return data


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quiz.id'), nullable=False, index=True)
    position = db.Column(db.Integer, nullable=False)
    text = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, nullable=False)  # list of option strings
    correct_option_index = db.Column(db.Integer, nullable=False)
    time_limit = db.Column(db.Integer, nullable=False, default=20)  # seconds
    quiz = db.relationship('Quiz', back_populates='questions')

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'options': list(self.options or []),
            'correct_option_index': self.correct_option_index,
            'time_limit': self.time_limit,
        }


class GameResult(db.Model):
    __tablename__ = 'game_result'
    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey('quiz.id'), nullable=True, index=True)
    code = db.Column(db.String(6), nullable=False)
    played_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    players = db.relationship(
        'PlayerResult',
        back_populates='game_result',
        order_by='PlayerResult.position',
        cascade='all, delete-orphan',
    )

    def to_dict(self):
        return {
            'id': self.id,
            'quiz_id': self.quiz_id,
            'code': self.code,
            'played_at': self.played_at.isoformat() if self.played_at else None,
            'players': [p.to_dict() for p in self.players],
        }


class PlayerResult(db.Model):
    __tablename__ = 'player_result'
    id = db.Column(db.Integer, primary_key=True)
    game_result_id = db.Column(db.Integer, db.ForeignKey('game_result.id'), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(PLAYER_NAME_MAX_LENGTH), nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)
    game_result = db.relationship('GameResult', back_populates='players')

    def to_dict(self):
        return {
            'name': self.name,
            'score': self.score,
        }
