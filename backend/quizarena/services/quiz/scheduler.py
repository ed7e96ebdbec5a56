import time
from datetime import datetime
from typing import Set, Tuple

from sqlalchemy import inspect

from quizarena import db, socketio
from quizarena.models import CompetitionWindow, utcnow
from . import clock
from .leaderboard import list_submitted_rankings
from .session import close_expired_sessions


_scheduled_windows: Set[Tuple[datetime, int]] = set()


def schedule_window_expiry(app) -> None:
    """Schedule the auto-submit sweep for the current competition window.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Ensures a single timer per (start_time, duration) of the window
    - On fire, aborts if the window was toggled meanwhile, otherwise submits
      every in-progress team and pushes a leaderboard update
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    with app.app_context():
        window = clock.get_window()
        end = clock.deadline(window)
        if end is None:
            return
        key = (window.start_time, window.duration_minutes)
        if key in _scheduled_windows:
            app.logger.info(f"[expiry-skip] window={key} already scheduled")
            return
        _scheduled_windows.add(key)
        delay = max(0.0, (end - utcnow()).total_seconds())
        app.logger.info(f"[expiry-set] window={key} deadline={end} delay={int(delay)}s")

    def _worker(expected: Tuple[datetime, int], delay: float):
        hb = int(app.config.get('EXPIRY_HEARTBEAT_SEC', 0) or 0)
        if hb > 0:
            slept = 0.0
            while slept < delay:
                step = min(hb, delay - slept)
                time.sleep(step)
                slept += step
                app.logger.info(f"[expiry-heartbeat] window={expected} remaining={int(max(0, delay - slept))}s")
        else:
            time.sleep(delay)
        # Wall-clock deadline has passed; give the comparison a strict margin
        time.sleep(1)
        with app.app_context():
            _scheduled_windows.discard(expected)
            current = clock.read_window()
            app.logger.info(
                f"[expiry-fire] expected={expected} actual_start={current.start_time if current else None}"
            )
            if current is None or not current.is_live or (current.start_time, current.duration_minutes) != expected:
                app.logger.info("[expiry-abort] window toggled since scheduling")
                return
            closed = close_expired_sessions()
            if closed:
                socketio.emit('leaderboard_update', {'rankings': list_submitted_rankings()}, to='leaderboard', namespace='/ws')

    if app.config.get('TESTING'):
        _worker(key, delay)
    else:
        socketio.start_background_task(_worker, key, delay)


def resume_window_expiry(app) -> None:
    """Re-arm the sweep for a window that was already live when the app started."""
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return

    with app.app_context():
        # Fresh database before the first migration
        if not inspect(db.engine).has_table(CompetitionWindow.__tablename__):
            return
        window = clock.read_window()
        live = window is not None and window.is_live

    if live:
        app.logger.info("[expiry-resume] window is live at startup")
        schedule_window_expiry(app)
