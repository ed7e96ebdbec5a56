from flask import current_app, jsonify

from quizarena.services.quiz.errors import QuizError


def render_quiz_error(exc: QuizError):
    current_app.logger.info(f"[rejected] code={exc.code} status={exc.status_code} msg={exc.message}")
    return jsonify(exc.to_dict()), exc.status_code
