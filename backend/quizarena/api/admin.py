from functools import wraps
import hmac

from flask import Blueprint, current_app, jsonify, request

from quizarena import socketio
from quizarena.api import render_quiz_error
from quizarena.services.quiz.clock import get_window, remaining_seconds, set_window
from quizarena.services.quiz.errors import QuizError
from quizarena.services.quiz.leaderboard import list_results
from quizarena.services.quiz.scheduler import schedule_window_expiry


admin = Blueprint('admin', __name__)
admin.register_error_handler(QuizError, render_quiz_error)


def admin_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        supplied = request.headers.get('X-Admin-Token', '')
        expected = current_app.config.get('ADMIN_TOKEN') or ''
        if not expected or not hmac.compare_digest(supplied, expected):
            return jsonify({'error': 'Admin token required'}), 401
        return view(*args, **kwargs)
    return wrapped


def _window_payload(window):
    payload = window.to_dict()
    payload['remaining_seconds'] = remaining_seconds(window)
    return payload


@admin.route('/window', methods=['GET'])
@admin_required
def get_competition_window():
    return jsonify(_window_payload(get_window()))


@admin.route('/window', methods=['PUT'])
@admin_required
def update_competition_window():
    data = request.get_json(silent=True) or {}
    is_live = data.get('is_live')
    duration = data.get('duration')
    if is_live is not None and not isinstance(is_live, bool):
        return jsonify({'error': 'is_live must be a boolean'}), 400
    try:
        window = set_window(is_live=is_live, duration_minutes=duration)
    except (TypeError, ValueError) as exc:
        return jsonify({'error': str(exc)}), 400

    payload = _window_payload(window)
    socketio.emit('window_update', payload, namespace='/ws')
    if window.is_live:
        schedule_window_expiry(current_app._get_current_object())
    return jsonify(payload)


@admin.route('/results', methods=['GET'])
@admin_required
def get_results():
    return jsonify(list_results())
