"""Per-team session lifecycle: not_started -> in_progress -> submitted."""

import random
from datetime import datetime
from typing import List, Optional

from flask import current_app

from quizarena.models import (
    STATUS_IN_PROGRESS,
    STATUS_NOT_STARTED,
    STATUS_SUBMITTED,
    Question,
    Team,
    utcnow,
)
from . import catalog, clock
from .errors import AlreadySubmitted, QuizNotLive
from .hints import revealed_hints
from .store import run_team_atomic, touch


def freeze(team: Team, now: datetime) -> None:
    """The single terminal transition. Callers check ``is_submitted`` first."""
    team.quiz_status = STATUS_SUBMITTED
    team.end_time = now
    touch(team, now)


def hydrate(team: Team, questions: List[Question]) -> dict:
    records = team.records_by_question()
    state = {}
    for question in questions:
        record = records.get(question.id)
        if record is None:
            continue
        max_attempts = question.max_attempts or 1
        state[str(question.id)] = {
            'attempts_used': record.attempts_used,
            'is_correct': record.is_correct,
            'is_locked': record.is_correct or record.attempts_used >= max_attempts,
            'hints_used': record.hints_used,
            'revealed_hints': revealed_hints(question, record),
        }
    return state


def start(team_pk, now: Optional[datetime] = None, rng: Optional[random.Random] = None) -> dict:
    """Open (or resume) a team's session and return the shuffled question set.

    The order is reshuffled on every call and never stored.
    """
    now = now or utcnow()
    rng = rng or random
    clock.get_window()

    def _start(team: Team) -> dict:
        if team.is_submitted:
            raise AlreadySubmitted()
        window = clock.read_window()
        if window is None or not window.is_live:
            raise QuizNotLive()
        # A team that never started before the deadline stays not_started
        if team.quiz_status == STATUS_NOT_STARTED and not clock.is_expired(window, now):
            team.quiz_status = STATUS_IN_PROGRESS
            team.start_time = now
            touch(team, now)
            current_app.logger.info(f"[start] team={team.id} started at {now}")

        questions = catalog.list_questions()
        shuffled = list(questions)
        rng.shuffle(shuffled)
        return {
            'questions': [catalog.public_view(q) for q in shuffled],
            'remaining_seconds': clock.remaining_seconds(window, now),
            'duration': window.duration_minutes,
            'start_time': window.to_dict()['start_time'],
            'state': hydrate(team, questions),
        }

    return run_team_atomic(team_pk, _start, label='start')


def submit(team_pk, now: Optional[datetime] = None) -> dict:
    now = now or utcnow()

    def _submit(team: Team) -> dict:
        if team.is_submitted:
            raise AlreadySubmitted()
        freeze(team, now)
        return {'score': team.score}

    result = run_team_atomic(team_pk, _submit, label='submit')
    current_app.logger.info(f"[submit] team={team_pk} score={result['score']}")
    return result


def close_expired_sessions(now: Optional[datetime] = None) -> List[int]:
    """Auto-submit every in-progress team once the window is over.

    ``end_time`` is stamped at the window deadline, not at the moment this
    runs, so a late sweep does not cost teams leaderboard position.
    """
    now = now or utcnow()
    window = clock.read_window()
    if window is None or not clock.is_expired(window, now):
        return []
    end = clock.deadline(window)

    def _close(team: Team) -> bool:
        if team.quiz_status != STATUS_IN_PROGRESS:
            return False
        # Never stamp an end before the team's own start
        freeze(team, max(end, team.start_time or end))
        return True

    pending = [t.id for t in Team.query.filter_by(quiz_status=STATUS_IN_PROGRESS).all()]
    closed = [pk for pk in pending if run_team_atomic(pk, _close, label='auto-submit')]
    current_app.logger.info(f"[auto-submit] deadline={end} closed={len(closed)} teams={closed}")
    return closed


def quiz_info(now: Optional[datetime] = None) -> dict:
    window = clock.get_window()
    return {
        'duration': window.duration_minutes,
        'question_count': Question.query.count(),
        'is_live': window.is_live,
        'remaining_seconds': clock.remaining_seconds(window, now),
    }
