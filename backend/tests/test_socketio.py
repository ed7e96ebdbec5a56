from datetime import timedelta

from quizarena import create_app, db
from quizarena.models import Question, Team, utcnow
from quizarena.services.quiz.clock import get_window, set_window
from quizarena.services.quiz.scheduler import schedule_window_expiry
from quizarena.services.quiz.session import start
from conftest import TestConfig

ADMIN = {'X-Admin-Token': 'test-admin-token'}


def _names(events):
    return [e['name'] for e in events]


def test_socket_connect_and_join_leaderboard(sio_client):
    if not sio_client.is_connected('/ws'):
        sio_client.connect(namespace='/ws')
    assert sio_client.is_connected('/ws')
    sio_client.get_received('/ws')

    sio_client.emit('join_leaderboard', {}, namespace='/ws')
    received = sio_client.get_received('/ws')
    assert any(pkt['name'] == 'joined' and pkt['args'][0]['room'] == 'leaderboard' for pkt in received)


def test_join_team_requires_login(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('join_team', {}, namespace='/ws')
    assert 'error' in _names(sio_client.get_received('/ws'))


def test_submit_pushes_leaderboard_update(logged_in, sio_client):
    set_window(is_live=True)
    sio_client.emit('join_leaderboard', {}, namespace='/ws')
    sio_client.get_received('/ws')

    assert logged_in.post('/api/quiz/submit').status_code == 200

    updates = [e for e in sio_client.get_received('/ws') if e['name'] == 'leaderboard_update']
    assert updates
    assert updates[-1]['args'][0]['rankings'][0]['team_id'] == 'TEAM01'


def test_forced_termination_notifies_team_room(logged_in, sio_client):
    sio_client.emit('join_team', {}, namespace='/ws')
    assert 'joined' in _names(sio_client.get_received('/ws'))

    for _ in range(4):
        logged_in.post('/api/quiz/violation')

    events = sio_client.get_received('/ws')
    terminated = [e for e in events if e['name'] == 'session_terminated']
    assert len(terminated) == 1
    assert terminated[0]['args'][0]['count'] == 4


def test_window_toggle_is_broadcast(client, sio_client):
    sio_client.get_received('/ws')
    client.put('/api/admin/window', json={'is_live': True}, headers=ADMIN)
    events = [e for e in sio_client.get_received('/ws') if e['name'] == 'window_update']
    assert events and events[0]['args'][0]['is_live'] is True


def test_expiry_scheduler_closes_overdue_sessions(flask_app, team, make_question):
    make_question()
    set_window(is_live=True, duration_minutes=1, now=utcnow() - timedelta(minutes=5))
    start(team.id, now=get_window().start_time + timedelta(seconds=10))

    flask_app.config['ENABLE_SCHEDULER_IN_TESTS'] = True
    schedule_window_expiry(flask_app)

    db.session.expire_all()
    closed = db.session.get(Team, team.id)
    assert closed.quiz_status == 'submitted'
    assert closed.end_time == get_window().start_time + timedelta(minutes=1)


def test_expiry_scheduler_noop_in_tests_by_default(flask_app, team, make_question):
    make_question()
    set_window(is_live=True, duration_minutes=1, now=utcnow() - timedelta(minutes=5))
    start(team.id, now=get_window().start_time + timedelta(seconds=10))

    schedule_window_expiry(flask_app)

    db.session.expire_all()
    assert db.session.get(Team, team.id).quiz_status == 'in_progress'


def test_app_startup_resumes_expiry_of_live_window(tmp_path):
    class FileDbConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'arena.db'}"
        ENABLE_SCHEDULER_IN_TESTS = True

    before = create_app(FileDbConfig)
    with before.app_context():
        db.create_all()
        db.session.add(Question(text='Capital of France?', correct_answer='Paris', difficulty='Easy'))
        team = Team(team_id='TEAM01')
        team.set_password('team123')
        db.session.add(team)
        db.session.commit()
        window = set_window(is_live=True, duration_minutes=1, now=utcnow() - timedelta(minutes=5))
        started_at = window.start_time
        start(team.id, now=started_at + timedelta(seconds=10))
        team_pk = team.id

    # A restarted process only has what the database remembers
    after = create_app(FileDbConfig)
    with after.app_context():
        closed = db.session.get(Team, team_pk)
        assert closed.quiz_status == 'submitted'
        assert closed.end_time == started_at + timedelta(minutes=1)
        db.drop_all()


def test_ping_pong(sio_client):
    sio_client.get_received('/ws')
    sio_client.emit('ping', {'n': 1}, namespace='/ws')
    events = sio_client.get_received('/ws')
    assert any(e['name'] == 'pong' and e['args'][0] == {'n': 1} for e in events)
