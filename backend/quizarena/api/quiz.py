from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from quizarena import socketio
from quizarena.models import MAX_ANSWER_LENGTH
from quizarena.api import render_quiz_error
from quizarena.services.quiz.attempts import attempt as svc_attempt
from quizarena.services.quiz.errors import QuizError
from quizarena.services.quiz.hints import reveal_hint as svc_reveal_hint
from quizarena.services.quiz.leaderboard import list_submitted_rankings
from quizarena.services.quiz.session import quiz_info, start as svc_start, submit as svc_submit
from quizarena.services.quiz.violations import ACTION_TERMINATE, record_violation as svc_record_violation


quiz = Blueprint('quiz', __name__)
quiz.register_error_handler(QuizError, render_quiz_error)


def _emit_leaderboard() -> None:
    socketio.emit('leaderboard_update', {'rankings': list_submitted_rankings()}, to='leaderboard', namespace='/ws')


@quiz.route('/start', methods=['GET'])
@login_required
def start_quiz():
    return jsonify(svc_start(current_user.id))


@quiz.route('/attempt', methods=['POST'])
@login_required
def attempt_question():
    data = request.get_json(silent=True) or {}
    question_id = data.get('question_id')
    if question_id is None:
        return jsonify({'error': 'question_id is required'}), 400
    answer = data.get('answer')
    if answer is not None and len(str(answer)) > MAX_ANSWER_LENGTH:
        return jsonify({'error': f'answer must be at most {MAX_ANSWER_LENGTH} characters'}), 400
    return jsonify(svc_attempt(current_user.id, question_id, answer))


@quiz.route('/hint', methods=['POST'])
@login_required
def reveal_hint():
    data = request.get_json(silent=True) or {}
    question_id = data.get('question_id')
    hint_index = data.get('hint_index')
    if question_id is None or hint_index is None:
        return jsonify({'error': 'question_id and hint_index are required'}), 400
    return jsonify(svc_reveal_hint(current_user.id, question_id, hint_index))


@quiz.route('/submit', methods=['POST'])
@login_required
def submit_quiz():
    result = svc_submit(current_user.id)
    _emit_leaderboard()
    return jsonify({'message': 'Quiz submitted successfully', 'score': result['score']})


@quiz.route('/violation', methods=['POST'])
@login_required
def record_violation():
    result = svc_record_violation(current_user.id)
    if result['action'] == ACTION_TERMINATE:
        socketio.emit('session_terminated', {'team_id': current_user.team_id, 'count': result['count']}, to=f"team:{current_user.id}", namespace='/ws')
        _emit_leaderboard()
        message = 'Disqualified'
    else:
        message = 'Violation recorded'
    return jsonify({'message': message, **result})


@quiz.route('/info', methods=['GET'])
@login_required
def get_quiz_info():
    return jsonify(quiz_info())
