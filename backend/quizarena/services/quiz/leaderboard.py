from datetime import datetime
from typing import Iterable, List

from quizarena.models import STATUS_SUBMITTED, Team


def _duration(session):
    if not (session.start_time and session.end_time):
        return None
    return (session.end_time - session.start_time).total_seconds()


def _sort_key(session):
    duration = _duration(session)
    # Unknown durations sort after every measured one
    return (-(session.score or 0), duration is None, duration or 0.0, session.team_id)


def rank_sessions(sessions: Iterable) -> List[dict]:
    """Rank submitted sessions: score desc, then own time taken asc.

    Dense 1-based ranks; sessions with equal score and equal duration share a
    rank. Pure over its input, nothing is stored.
    """
    submitted = sorted((s for s in sessions if s.quiz_status == STATUS_SUBMITTED), key=_sort_key)
    rows = []
    rank = 0
    previous = None
    for session in submitted:
        tie_key = (session.score or 0, _duration(session))
        if tie_key != previous:
            rank += 1
            previous = tie_key
        rows.append({
            'rank': rank,
            'team_id': session.team_id,
            'score': session.score or 0,
            'duration_seconds': _duration(session),
            'violation_count': session.violation_count or 0,
        })
    return rows


def list_submitted_rankings() -> List[dict]:
    return rank_sessions(Team.query.filter_by(quiz_status=STATUS_SUBMITTED).all())


def list_results() -> List[dict]:
    """Every team, submitted or not: score desc, earlier finish first."""
    teams = Team.query.all()
    teams.sort(key=lambda t: (-(t.score or 0), t.end_time is None, t.end_time or datetime.max, t.team_id))
    return [t.to_dict() for t in teams]
