"""Competition window: the single clock every team is timed against."""

from datetime import datetime, timedelta
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError

from quizarena import db
from quizarena.models import CompetitionWindow, utcnow
from .errors import QuizExpired, QuizNotLive
from .store import run_atomic


def read_window() -> Optional[CompetitionWindow]:
    """Current window row without creating it; safe inside a team transaction."""
    return db.session.get(CompetitionWindow, CompetitionWindow.SINGLETON_ID)


def get_window() -> CompetitionWindow:
    """Return the window row, creating the default one on first read."""
    window = db.session.get(CompetitionWindow, CompetitionWindow.SINGLETON_ID)
    if window is not None:
        return window
    window = CompetitionWindow(
        id=CompetitionWindow.SINGLETON_ID,
        is_live=False,
        duration_minutes=int(current_app.config.get('DEFAULT_DURATION_MIN', 30)),
    )
    db.session.add(window)
    try:
        db.session.commit()
    except IntegrityError:
        # Another worker created it first
        db.session.rollback()
        window = db.session.get(CompetitionWindow, CompetitionWindow.SINGLETON_ID)
    return window


def set_window(is_live: Optional[bool] = None, duration_minutes: Optional[int] = None, now: Optional[datetime] = None) -> CompetitionWindow:
    """Toggle the window and/or change its duration in one atomic update.

    ``start_time`` is stamped only on a false->true transition and cleared on
    true->false, so re-sending ``is_live=True`` keeps the running clock.
    """
    if duration_minutes is not None:
        if isinstance(duration_minutes, bool) or int(duration_minutes) < 1:
            raise ValueError('duration must be a positive number of minutes')
        duration_minutes = int(duration_minutes)
    now = now or utcnow()
    get_window()

    def _apply(window: CompetitionWindow) -> CompetitionWindow:
        was_live = bool(window.is_live)
        if duration_minutes is not None:
            window.duration_minutes = duration_minutes
        if is_live is not None:
            window.is_live = bool(is_live)
            if window.is_live and not was_live:
                window.start_time = now
            elif was_live and not window.is_live:
                window.start_time = None
        return window

    window = run_atomic(CompetitionWindow, CompetitionWindow.SINGLETON_ID, _apply, label='window-set')
    current_app.logger.info(
        f"[window-set] live={window.is_live} duration={window.duration_minutes}m start={window.start_time} version={window.version}"
    )
    return window


def deadline(window: CompetitionWindow) -> Optional[datetime]:
    if not window.is_live or window.start_time is None:
        return None
    return window.start_time + timedelta(minutes=window.duration_minutes)


def remaining_seconds(window: CompetitionWindow, now: Optional[datetime] = None) -> int:
    end = deadline(window)
    if end is None:
        return 0
    now = now or utcnow()
    return max(0, int((end - now).total_seconds()))


def is_expired(window: CompetitionWindow, now: Optional[datetime] = None) -> bool:
    end = deadline(window)
    return end is not None and (now or utcnow()) > end


def ensure_accepting(window: Optional[CompetitionWindow], now: Optional[datetime] = None) -> None:
    """Server-side gate for attempts and hint reveals."""
    if window is None or not window.is_live or window.start_time is None:
        raise QuizNotLive()
    if is_expired(window, now):
        raise QuizExpired()
