from quizarena import db, bcrypt
from flask_login import UserMixin
from sqlalchemy.orm import validates
from datetime import datetime, timezone
import json

DIFFICULTIES = ('Easy', 'Medium', 'Hard')
MAX_HINTS_PER_QUESTION = 3
MAX_ANSWER_LENGTH = 256

STATUS_NOT_STARTED = 'not_started'
STATUS_IN_PROGRESS = 'in_progress'
STATUS_SUBMITTED = 'submitted'


def utcnow():
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _isoformat(value):
    return value.isoformat() + 'Z' if value else None


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(64), nullable=False, default='General')
    difficulty = db.Column(db.String(16), nullable=False, default='Medium')
    correct_answer = db.Column(db.String(256), nullable=False)
    max_attempts = db.Column(db.Integer, nullable=False, default=1)
    hints_json = db.Column('hints', db.Text, nullable=True)  # JSON-encoded list of hint texts
    links_json = db.Column('links', db.Text, nullable=True)  # JSON-encoded list of {label, url}
    created_at = db.Column(db.DateTime, default=utcnow)

    @validates('difficulty')
    def validate_difficulty(self, key, value):
        if value not in DIFFICULTIES:
            raise ValueError(f'difficulty must be one of {", ".join(DIFFICULTIES)}')
        return value

    @validates('max_attempts')
    def validate_max_attempts(self, key, value):
        if value is None:
            return 1
        if int(value) < 1:
            raise ValueError('max_attempts must be at least 1')
        return int(value)

    @property
    def hints(self):
        try:
            return json.loads(self.hints_json) if self.hints_json else []
        except ValueError:
            return []

    @hints.setter
    def hints(self, value):
        value = [str(h) for h in (value or [])]
        if len(value) > MAX_HINTS_PER_QUESTION:
            raise ValueError(f'a question carries at most {MAX_HINTS_PER_QUESTION} hints')
        self.hints_json = json.dumps(value)

    @property
    def links(self):
        try:
            return json.loads(self.links_json) if self.links_json else []
        except ValueError:
            return []

    @links.setter
    def links(self, value):
        self.links_json = json.dumps([
            {'label': link.get('label', ''), 'url': link.get('url')} for link in (value or [])
        ])


class Team(UserMixin, db.Model):
    """A team's login identity and its quiz session record."""
    __tablename__ = 'team'
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    quiz_status = db.Column(db.String(32), nullable=False, default=STATUS_NOT_STARTED)  # not_started, in_progress, submitted
    score = db.Column(db.Integer, nullable=False, default=0)
    violation_count = db.Column(db.Integer, nullable=False, default=0)
    start_time = db.Column(db.DateTime, nullable=True)
    end_time = db.Column(db.DateTime, nullable=True)
    last_activity_at = db.Column(db.DateTime, nullable=True)
    version = db.Column(db.Integer, nullable=False)
    answers = db.relationship('AnswerRecord', back_populates='team', cascade='all, delete-orphan')

    __mapper_args__ = {'version_id_col': version}

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def is_submitted(self):
        return self.quiz_status == STATUS_SUBMITTED

    @property
    def duration_seconds(self):
        if not (self.start_time and self.end_time):
            return None
        return (self.end_time - self.start_time).total_seconds()

    def records_by_question(self):
        return {record.question_id: record for record in self.answers}

    def to_dict(self):
        return {
            'id': self.id,
            'team_id': self.team_id,
            'quiz_status': self.quiz_status,
            'score': self.score,
            'violation_count': self.violation_count,
            'start_time': _isoformat(self.start_time),
            'end_time': _isoformat(self.end_time),
            'duration_seconds': self.duration_seconds,
        }


class AnswerRecord(db.Model):
    __tablename__ = 'answer_record'
    __table_args__ = (
        db.UniqueConstraint('team_id', 'question_id', name='uq_answer_record_team_question'),
    )
    id = db.Column(db.Integer, primary_key=True)
    team_id = db.Column(db.Integer, db.ForeignKey('team.id'), nullable=False, index=True)
    question_id = db.Column(db.Integer, db.ForeignKey('question.id'), nullable=False)
    attempts_used = db.Column(db.Integer, nullable=False, default=0)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    hints_used = db.Column(db.Integer, nullable=False, default=0)
    last_submitted_text = db.Column(db.String(MAX_ANSWER_LENGTH), nullable=True)  # audit copy; the route rejects longer answers
    # Snapshot of what was actually charged/awarded, independent of later question edits
    points_awarded = db.Column(db.Integer, nullable=False, default=0)
    hint_points_spent = db.Column(db.Integer, nullable=False, default=0)
    team = db.relationship('Team', back_populates='answers')


class CompetitionWindow(db.Model):
    """The one timing configuration shared by every team."""
    __tablename__ = 'competition_window'
    SINGLETON_ID = 1

    id = db.Column(db.Integer, primary_key=True)
    is_live = db.Column(db.Boolean, nullable=False, default=False)
    duration_minutes = db.Column(db.Integer, nullable=False, default=30)
    start_time = db.Column(db.DateTime, nullable=True)
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}

    def to_dict(self):
        return {
            'is_live': self.is_live,
            'duration': self.duration_minutes,
            'start_time': _isoformat(self.start_time),
            'version': self.version,
        }
