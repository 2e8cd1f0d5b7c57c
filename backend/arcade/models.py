from arcade import db
from arcade.services.rules import grand_total
from datetime import datetime, timezone
from sqlalchemy import event
from sqlalchemy.orm import validates
import random
import string
import time


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


class Team(db.Model):
    __tablename__ = 'team'
    id = db.Column(db.Integer, primary_key=True)
    team_name = db.Column(db.String(50), nullable=False)
    # Lower-cased name; makes uniqueness case-insensitive at the database level
    name_key = db.Column(db.String(50), unique=True, nullable=False, index=True)
    access_code = db.Column(db.String(32), nullable=False)
    difficulty = db.Column(db.String(16), nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    game_completed = db.Column(db.Boolean, default=False, nullable=False)
    questions_correct = db.Column(db.Integer, default=0, nullable=False)
    total_questions = db.Column(db.Integer, default=8, nullable=False)
    quiz_score = db.Column(db.Integer, default=0, nullable=False)
    mine_score = db.Column(db.Integer, default=0, nullable=False)
    pro_score = db.Column(db.Integer, default=0, nullable=False)
    total_score = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    sessions = db.relationship('GameSession', back_populates='team')

    @staticmethod
    def normalize_name(name):
        return name.strip().lower()

    @validates('team_name')
    def _sync_name_key(self, key, value):
        value = value.strip()
        self.name_key = self.normalize_name(value)
        return value

    def to_dict(self):
        total_questions = self.total_questions or 0
        return {
            'id': self.id,
            'teamName': self.team_name,
            'difficulty': self.difficulty,
            'accessCode': self.access_code,
            'isActive': self.is_active,
            'questionsCorrect': self.questions_correct,
            'totalQuestions': total_questions,
            'quizScore': self.quiz_score,
            'mineScore': self.mine_score,
            'proScore': self.pro_score,
            'totalScore': self.total_score,
            'gameCompleted': self.game_completed,
            'registeredAt': _iso(self.created_at),
            'completedAt': _iso(self.completed_at),
            'quizAccuracy': round((self.questions_correct or 0) / total_questions * 100) if total_questions > 0 else 0,
            'status': 'Completed' if self.game_completed else 'In Progress',
        }


def generate_session_id(length=9):
    """Generate a unique, opaque session id."""
    alphabet = string.ascii_lowercase + string.digits
    while True:
        session_id = f"{int(time.time() * 1000)}-{''.join(random.choices(alphabet, k=length))}"
        if not GameSession.query.filter_by(session_id=session_id).first():
            return session_id


class GameSession(db.Model):
    __tablename__ = 'game_session'
    __table_args__ = (
        db.CheckConstraint('quiz_score >= 0 AND quiz_score <= 8', name='ck_game_session_quiz_score'),
        db.CheckConstraint('mine_score >= 0 AND pro_score >= 0', name='ck_game_session_mine_scores'),
    )
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    team_id = db.Column(db.Integer, db.ForeignKey('team.id'), nullable=False, index=True)
    status = db.Column(db.String(32), default='active', nullable=False)  # active, quiz_completed, mine_completed, finished
    started_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    quiz_score = db.Column(db.Integer, default=0, nullable=False)
    mine_score = db.Column(db.Integer, default=0, nullable=False)
    pro_score = db.Column(db.Integer, default=0, nullable=False)
    total_score = db.Column(db.Integer, default=0, nullable=False)
    can_play_mine = db.Column(db.Boolean, default=False, nullable=False)
    team = db.relationship('Team', back_populates='sessions')
    responses = db.relationship('QuizResponse', back_populates='game_session', lazy='dynamic')
    actions = db.relationship('MineGameAction', back_populates='game_session', lazy='dynamic')

    def __init__(self, **kwargs):
        super(GameSession, self).__init__(**kwargs)
        if not self.session_id:
            self.session_id = generate_session_id()
        for field in ('quiz_score', 'mine_score', 'pro_score'):
            if getattr(self, field) is None:
                setattr(self, field, 0)
        if self.status is None:
            self.status = 'active'
        if self.can_play_mine is None:
            self.can_play_mine = False

    def to_dict(self):
        return {
            'sessionId': self.session_id,
            'teamId': self.team_id,
            'status': self.status,
            'startedAt': _iso(self.started_at),
            'completedAt': _iso(self.completed_at),
            'quizScore': self.quiz_score,
            'mineScore': self.mine_score,
            'proScore': self.pro_score,
            'totalScore': self.total_score,
            'canPlayMine': self.can_play_mine,
        }


@event.listens_for(GameSession, 'before_insert')
@event.listens_for(GameSession, 'before_update')
def _recompute_total_score(mapper, connection, target):
    target.total_score = grand_total(target.quiz_score or 0, target.mine_score or 0, target.pro_score or 0)


class QuizQuestion(db.Model):
    __tablename__ = 'quiz_question'
    __table_args__ = (
        db.UniqueConstraint('difficulty', 'question_id', name='uq_quiz_question_slot'),
    )
    id = db.Column(db.Integer, primary_key=True)
    difficulty = db.Column(db.String(16), nullable=False, index=True)
    question_id = db.Column(db.Integer, nullable=False)  # 1..8
    question = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, nullable=False)  # exactly four strings
    correct_answer = db.Column(db.Integer, nullable=False)  # 0..3
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'difficulty': self.difficulty,
            'questionId': self.question_id,
            'question': self.question,
            'options': list(self.options or []),
            'correctAnswer': self.correct_answer,
            'createdAt': _iso(self.created_at),
            'updatedAt': _iso(self.updated_at),
        }

    def to_quiz_dict(self):
        return {
            'id': self.question_id,
            'question': self.question,
            'options': list(self.options or []),
            'correct': self.correct_answer,
        }


class QuizResponse(db.Model):
    __tablename__ = 'quiz_response'
    __table_args__ = (
        db.UniqueConstraint('game_session_id', 'question_id', name='uq_quiz_response_session_question'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, nullable=False)
    question = db.Column(db.Text, nullable=False)
    options = db.Column(db.JSON, nullable=False)
    selected_answer = db.Column(db.Integer, nullable=False)
    correct_answer = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, default=False, nullable=False)
    answered_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    game_session = db.relationship('GameSession', back_populates='responses')

    def to_dict(self):
        return {
            'questionId': self.question_id,
            'question': self.question,
            'options': list(self.options or []),
            'selectedAnswer': self.selected_answer,
            'correctAnswer': self.correct_answer,
            'isCorrect': self.is_correct,
            'answeredAt': _iso(self.answered_at),
        }


@event.listens_for(QuizResponse, 'before_insert')
@event.listens_for(QuizResponse, 'before_update')
def _derive_correctness(mapper, connection, target):
    target.is_correct = target.selected_answer == target.correct_answer


class MineGameAction(db.Model):
    __tablename__ = 'mine_game_action'
    __table_args__ = (
        db.CheckConstraint('cell_x >= 0 AND cell_x <= 2 AND cell_y >= 0 AND cell_y <= 2', name='ck_mine_game_action_cell'),
    )
    id = db.Column(db.Integer, primary_key=True)
    game_session_id = db.Column(db.Integer, db.ForeignKey('game_session.id'), nullable=False, index=True)
    cell_x = db.Column(db.Integer, nullable=False)
    cell_y = db.Column(db.Integer, nullable=False)
    cell_type = db.Column(db.String(16), nullable=False)  # mine, pro, blank
    action = db.Column(db.String(16), default='reveal', nullable=False)  # reveal, flag
    result = db.Column(db.String(16), nullable=False)  # hit, miss, pro_found
    action_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    game_session = db.relationship('GameSession', back_populates='actions')

    def to_dict(self):
        return {
            'cellX': self.cell_x,
            'cellY': self.cell_y,
            'cellType': self.cell_type,
            'action': self.action,
            'result': self.result,
            'actionAt': _iso(self.action_at),
        }


class TimerSetting(db.Model):
    __tablename__ = 'timer_setting'
    difficulty = db.Column(db.String(16), primary_key=True)
    seconds = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
