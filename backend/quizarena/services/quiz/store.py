"""Atomic read-modify-write against one team (or window) row.

Each logical operation runs under an in-process lock keyed by the row,
re-reads the row fresh (``SELECT ... FOR UPDATE`` where the database supports
it) and commits with an optimistic version check. Lost races surface as
``StaleDataError`` or, for a concurrently created answer record,
``IntegrityError``; both are retried a bounded number of times.
"""

import threading
from typing import Callable, Dict, Tuple, TypeVar

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.attributes import flag_modified
from sqlalchemy.orm.exc import StaleDataError

from quizarena import db
from quizarena.models import AnswerRecord, Question, Team
from .errors import ConcurrentUpdateConflict, NotFound

T = TypeVar('T')

_row_locks: Dict[Tuple[str, int], threading.Lock] = {}
_row_locks_guard = threading.Lock()


def _lock_for(key: Tuple[str, int]) -> threading.Lock:
    with _row_locks_guard:
        lock = _row_locks.get(key)
        if lock is None:
            lock = _row_locks[key] = threading.Lock()
        return lock


def _coerce_pk(pk) -> int:
    try:
        return int(pk)
    except (TypeError, ValueError):
        raise NotFound()


def run_atomic(model, pk, operation: Callable[..., T], label: str = 'update') -> T:
    """Run ``operation(row)`` as one transaction on ``model`` row ``pk``.

    Engine errors raised by ``operation`` roll back and propagate unchanged.
    """
    pk = _coerce_pk(pk)
    retries = max(1, int(current_app.config.get('CONCURRENT_UPDATE_RETRIES', 3)))
    key = (model.__tablename__, pk)
    for attempt_no in range(1, retries + 1):
        with _lock_for(key):
            try:
                db.session.expire_all()
                row = db.session.get(model, pk, populate_existing=True, with_for_update=True)
                if row is None:
                    raise NotFound(f'{model.__name__} not found.')
                result = operation(row)
                db.session.commit()
                return result
            except (StaleDataError, IntegrityError) as exc:
                db.session.rollback()
                current_app.logger.warning(
                    f"[retry] op={label} table={model.__tablename__} id={pk} attempt={attempt_no}/{retries} reason={type(exc).__name__}"
                )
            except Exception:
                db.session.rollback()
                raise
    current_app.logger.error(f"[conflict] op={label} table={model.__tablename__} id={pk} gave up after {retries} attempts")
    raise ConcurrentUpdateConflict()


def run_team_atomic(team_pk, operation: Callable[[Team], T], label: str = 'update') -> T:
    return run_atomic(Team, team_pk, operation, label=label)


def touch(team: Team, now) -> None:
    """Force a version bump on the team row even if only child rows change."""
    team.last_activity_at = now
    flag_modified(team, 'last_activity_at')


def find_record(team: Team, question_id: int):
    for record in team.answers:
        if record.question_id == question_id:
            return record
    return None


def get_or_create_record(team: Team, question: Question) -> AnswerRecord:
    record = find_record(team, question.id)
    if record is None:
        record = AnswerRecord(
            question_id=question.id,
            attempts_used=0,
            is_correct=False,
            hints_used=0,
            points_awarded=0,
            hint_points_spent=0,
        )
        team.answers.append(record)
    return record
