from datetime import datetime
from typing import Optional

from flask import current_app

from quizarena.models import Team, utcnow
from .session import freeze
from .store import run_team_atomic, touch

ACTION_WARNING = 'warning'
ACTION_TERMINATE = 'terminate'


def record_violation(team_pk, now: Optional[datetime] = None) -> dict:
    """Count one anti-cheat signal; force-submit at the threshold.

    A frozen session answers ``terminate`` without counting.
    """
    now = now or utcnow()
    threshold = int(current_app.config.get('VIOLATION_THRESHOLD', 4))

    def _record(team: Team) -> dict:
        if team.is_submitted:
            return {'action': ACTION_TERMINATE, 'count': team.violation_count, 'counted': False}
        team.violation_count = (team.violation_count or 0) + 1
        touch(team, now)
        if team.violation_count >= threshold:
            freeze(team, now)
            return {'action': ACTION_TERMINATE, 'count': team.violation_count, 'counted': True}
        return {'action': ACTION_WARNING, 'count': team.violation_count, 'counted': True}

    result = run_team_atomic(team_pk, _record, label='violation')
    if result.pop('counted'):
        current_app.logger.info(f"[violation] team={team_pk} count={result['count']} action={result['action']}")
    return result
