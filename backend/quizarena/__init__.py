from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

SEED_QUESTIONS = [
    {
        'text': 'What is the capital of France?',
        'correct_answer': 'Paris',
        'category': 'Geography',
        'difficulty': 'Easy',
        'hints': ['It is known as the City of Light.'],
    },
    {
        'text': 'Which planet is known as the Red Planet?',
        'correct_answer': 'Mars',
        'category': 'Science',
        'difficulty': 'Medium',
        'max_attempts': 2,
        'hints': ['It is the fourth planet from the Sun.', 'Named after the Roman god of war.'],
    },
    {
        'text': 'What is 2 + 2?',
        'correct_answer': '4',
        'category': 'Math',
        'difficulty': 'Easy',
    },
    {
        'text': "Who wrote 'Hamlet'?",
        'correct_answer': 'William Shakespeare',
        'category': 'Literature',
        'difficulty': 'Medium',
        'hints': ['An English playwright.', 'Also wrote Macbeth.'],
    },
    {
        'text': 'What is the chemical symbol for Gold?',
        'correct_answer': 'Au',
        'category': 'Science',
        'difficulty': 'Hard',
        'max_attempts': 3,
        'hints': ['Two letters.', 'From the Latin word aurum.', 'Starts with A.'],
    },
]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from quizarena.main import main
    flask_app.register_blueprint(main)

    from quizarena.api.quiz import quiz
    flask_app.register_blueprint(quiz, url_prefix='/api/quiz')

    from quizarena.api.admin import admin
    flask_app.register_blueprint(admin, url_prefix='/api/admin')

    from quizarena.api.leaderboard import leaderboard
    flask_app.register_blueprint(leaderboard, url_prefix='/api/leaderboard')

    from quizarena.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Flask-Login user loader: the authenticated identity is the team
    from quizarena.models import Team

    @login_manager.user_loader
    def load_team(team_pk):
        return db.session.get(Team, int(team_pk))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from quizarena.models import CompetitionWindow, Question
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            db.session.add(CompetitionWindow(
                id=CompetitionWindow.SINGLETON_ID,
                is_live=False,
                duration_minutes=flask_app.config.get('DEFAULT_DURATION_MIN', 30),
            ))

            team = Team(team_id='TEAM01')
            team.set_password('team123')
            db.session.add(team)

            for data in SEED_QUESTIONS:
                db.session.add(Question(**data))

            db.session.commit()
            print(f'Database has been reset and seeded with {len(SEED_QUESTIONS)} questions!')

    @click.command('close-expired')
    def close_expired_command():
        """Submits every in-progress team once the competition window has expired."""
        from quizarena.services.quiz.session import close_expired_sessions
        with flask_app.app_context():
            closed = close_expired_sessions()
            print(f'Closed {len(closed)} expired session(s).')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(close_expired_command)

    from quizarena.services.quiz.scheduler import resume_window_expiry
    resume_window_expiry(flask_app)

    return flask_app
