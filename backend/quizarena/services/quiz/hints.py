from datetime import datetime
from typing import List, Optional

from flask import current_app

from quizarena.models import AnswerRecord, Question, Team, utcnow
from . import catalog, clock
from .attempts import mark_started
from .errors import AlreadySubmitted, NoHintsAvailable
from .store import get_or_create_record, run_team_atomic, touch


def revealed_hints(question: Question, record: Optional[AnswerRecord]) -> List[str]:
    """Hint texts the team has already paid for on this question."""
    if record is None:
        return []
    return question.hints[:min(record.hints_used, catalog.hint_limit(question))]


def reveal_hint(team_pk, question_id, hint_index, now: Optional[datetime] = None) -> dict:
    """Reveal the next hint for a question and charge its cost.

    Hints go strictly in order: ``hint_index`` must equal the number already
    revealed. The deduction is not floored, so a team's score can go negative.
    """
    now = now or utcnow()
    if isinstance(hint_index, bool):
        raise NoHintsAvailable('Hint index must be an integer.')
    try:
        hint_index = int(hint_index)
    except (TypeError, ValueError):
        raise NoHintsAvailable('Hint index must be an integer.')

    def _reveal(team: Team) -> dict:
        if team.is_submitted:
            raise AlreadySubmitted()
        clock.ensure_accepting(clock.read_window(), now)
        question = catalog.get_question(question_id)

        record = get_or_create_record(team, question)
        if record.is_correct:
            raise NoHintsAvailable('Question already answered correctly.')
        if hint_index != record.hints_used:
            raise NoHintsAvailable(f'Hints must be revealed in order; next hint is #{record.hints_used}.')
        if record.hints_used >= catalog.hint_limit(question):
            raise NoHintsAvailable()

        mark_started(team, now)
        cost = catalog.hint_cost(hint_index)
        team.score -= cost
        record.hint_points_spent += cost
        record.hints_used += 1
        touch(team, now)

        return {
            'hint_text': question.hints[hint_index],
            'new_score': team.score,
            'hints_used': record.hints_used,
            'cost': cost,
        }

    result = run_team_atomic(team_pk, _reveal, label='hint')
    current_app.logger.info(
        f"[hint] team={team_pk} question={question_id} index={hint_index} cost={result['cost']} score={result['new_score']}"
    )
    return result
