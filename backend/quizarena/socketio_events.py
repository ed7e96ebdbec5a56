from flask_socketio import join_room, leave_room, emit
from flask_login import current_user
from quizarena import socketio


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_team(data):
    """Join the private room a team's forced-termination notice goes to.

    Only the logged-in team itself may join its room.
    """
    if not current_user.is_authenticated:
        emit('error', {'message': 'login required'})
        return
    room = f"team:{current_user.id}"
    join_room(room)
    emit('joined', {'room': room})


def handle_join_leaderboard(data=None):
    join_room('leaderboard')
    emit('joined', {'room': 'leaderboard'})


def handle_leave_leaderboard(data=None):
    leave_room('leaderboard')
    emit('left', {'room': 'leaderboard'})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_team', handle_join_team, namespace=namespace)
        socketio.on_event('join_leaderboard', handle_join_leaderboard, namespace=namespace)
        socketio.on_event('leave_leaderboard', handle_leave_leaderboard, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
