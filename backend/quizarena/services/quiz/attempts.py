from datetime import datetime
from typing import Optional

from flask import current_app

from quizarena.models import MAX_ANSWER_LENGTH, STATUS_IN_PROGRESS, STATUS_NOT_STARTED, Team, utcnow
from . import catalog, clock
from .errors import AlreadyCorrect, AlreadySubmitted, NoAttemptsRemaining
from .store import get_or_create_record, run_team_atomic, touch


def normalize_answer(text: Optional[str]) -> str:
    return ('' if text is None else str(text)).strip().casefold()


def mark_started(team: Team, now: datetime) -> None:
    """First accepted mutation of a team that never called start."""
    if team.quiz_status == STATUS_NOT_STARTED:
        team.quiz_status = STATUS_IN_PROGRESS
        team.start_time = now


def attempt(team_pk, question_id, submitted_text: Optional[str], now: Optional[datetime] = None) -> dict:
    """Evaluate one answer submission for one question.

    Points for a question are awarded once: a correct record refuses any
    further attempt, and the check and the award happen in the same
    transaction on the team row.
    """
    now = now or utcnow()

    def _evaluate(team: Team) -> dict:
        if team.is_submitted:
            raise AlreadySubmitted()
        clock.ensure_accepting(clock.read_window(), now)
        question = catalog.get_question(question_id)

        record = get_or_create_record(team, question)
        if record.is_correct:
            raise AlreadyCorrect()
        max_attempts = question.max_attempts or 1
        if record.attempts_used >= max_attempts:
            raise NoAttemptsRemaining()

        mark_started(team, now)
        correct = normalize_answer(submitted_text) == normalize_answer(question.correct_answer)
        record.attempts_used += 1
        record.last_submitted_text = ('' if submitted_text is None else str(submitted_text))[:MAX_ANSWER_LENGTH]
        if correct:
            points = catalog.point_value(question.difficulty)
            record.is_correct = True
            record.points_awarded = points
            team.score += points
        touch(team, now)

        return {
            'correct': correct,
            'attempts_left': max_attempts - record.attempts_used,
            'message': 'Correct!' if correct else 'Incorrect answer.',
            'score': team.score,
        }

    result = run_team_atomic(team_pk, _evaluate, label='attempt')
    current_app.logger.info(
        f"[attempt] team={team_pk} question={question_id} correct={result['correct']} attempts_left={result['attempts_left']} score={result['score']}"
    )
    return result
