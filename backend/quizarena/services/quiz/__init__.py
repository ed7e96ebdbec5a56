"""Quiz session and scoring engine.

Catalog rules, the competition clock, per-team atomic updates, attempts,
hints, violations, the session lifecycle and the leaderboard. HTTP routes and
socket handlers import from here; nothing in this package knows about
request objects.
"""
