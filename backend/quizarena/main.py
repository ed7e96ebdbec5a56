from flask import Blueprint, current_app, request, jsonify
from flask_login import login_user, logout_user, login_required
from quizarena.models import Team

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Trivia Arena API is running'})

@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    team = Team.query.filter_by(team_id=(data.get('team_id') or '').strip()).first()
    if not team or not team.check_password(data.get('password') or ''):
        return jsonify({'error': 'Invalid credentials'}), 401
    if team.is_submitted:
        return jsonify({'error': 'You have already submitted the quiz.'}), 403
    login_user(team, remember=True)
    current_app.logger.info(f"[login] team={team.id} team_id={team.team_id}")
    return jsonify({'message': 'Logged in successfully.', 'team': team.to_dict()})

@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})
