import os
import sys
from datetime import datetime
import pytest

# Ensure the backend root (containing the `quizarena` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizarena import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    ADMIN_TOKEN = 'test-admin-token'
    DEFAULT_DURATION_MIN = 30
    VIOLATION_THRESHOLD = 4
    CONCURRENT_UPDATE_RETRIES = 3


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import quizarena.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app, client):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=client,
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')


@pytest.fixture()
def clock_start():
    """Fixed wall-clock instant the competition window opens at in engine tests."""
    return datetime(2026, 3, 14, 9, 0, 0)


@pytest.fixture()
def live_window(flask_app, clock_start):
    from quizarena.services.quiz.clock import set_window
    return set_window(is_live=True, duration_minutes=30, now=clock_start)


@pytest.fixture()
def make_team(flask_app):
    from quizarena.models import Team

    def _make(team_id='TEAM01', password='team123'):
        team = Team(team_id=team_id)
        team.set_password(password)
        db.session.add(team)
        db.session.commit()
        return team
    return _make


@pytest.fixture()
def make_question(flask_app):
    from quizarena.models import Question

    def _make(**kwargs):
        data = {
            'text': 'What is the capital of France?',
            'correct_answer': 'Paris',
            'difficulty': 'Easy',
        }
        data.update(kwargs)
        question = Question(**data)
        db.session.add(question)
        db.session.commit()
        return question
    return _make


@pytest.fixture()
def team(make_team):
    return make_team()


@pytest.fixture()
def logged_in(client, team):
    res = client.post('/login', json={'team_id': 'TEAM01', 'password': 'team123'})
    assert res.status_code == 200
    return client
