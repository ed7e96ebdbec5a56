from flask import Blueprint, jsonify

from quizarena.services.quiz.leaderboard import list_submitted_rankings

leaderboard = Blueprint('leaderboard', __name__)


@leaderboard.route('', methods=['GET'])
def get_leaderboard():
    """Ranking of submitted teams, recomputed on every read."""
    return jsonify({'rankings': list_submitted_rankings()})
