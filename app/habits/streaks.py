"""
Streak engine.

Core rules:
  - A qualifying day has completions >= times_per_day.
  - current_streak counts consecutive qualifying days ending today, or ending
    yesterday while today has not qualified yet.
  - Any skipped day breaks the chain; the next qualifying day starts at 1.
  - best_streak = max(best_streak, current_streak); it never decreases.
  - Always recomputed from the ledger, never incremented per completion.
"""
import logging
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, Mapping

from sqlalchemy.orm import Session

from app.core.clock import local_date
from app.habits.models import UserHabit, Completion

logger = logging.getLogger(__name__)


def daily_counts(completed_ats: Iterable[datetime]) -> Counter:
    """Completion events per local day."""
    return Counter(local_date(ts) for ts in completed_ats)


def current_streak_from_counts(counts: Mapping[date, int], times_per_day: int, today: date) -> int:
    def qualifies(day: date) -> bool:
        return counts.get(day, 0) >= times_per_day

    # Today may still be in progress; the chain can end at yesterday
    day = today if qualifies(today) else today - timedelta(days=1)

    streak = 0
    while qualifies(day):
        streak += 1
        day -= timedelta(days=1)
    return streak


def recompute_streak(db: Session, habit: UserHabit, today: date) -> UserHabit:
    """
    Rewrite current/best streak from the habit's full ledger.

    Runs inside the caller's transaction after the habit row was locked, so
    the ledger cannot change under it. Does not commit.
    """
    db.flush()
    rows = (
        db.query(Completion.completed_at)
        .filter(Completion.user_habit_id == habit.id)
        .all()
    )
    counts = daily_counts(ts for (ts,) in rows)

    old_current, old_best = habit.current_streak, habit.best_streak
    current = current_streak_from_counts(counts, habit.times_per_day, today)

    habit.current_streak = current
    habit.best_streak = max(old_best or 0, current)

    if (old_current, old_best) != (habit.current_streak, habit.best_streak):
        logger.info("[STREAK] habit=%s current %s -> %s best %s -> %s",
                    habit.id, old_current, habit.current_streak, old_best, habit.best_streak)
    return habit


def live_streak(habit: UserHabit, counts: Mapping[date, int], today: date) -> int:
    """
    The stored current_streak as of `today`, without writing anything.

    The stored value was computed at the last ledger mutation. If neither
    today nor yesterday qualifies, days have been skipped since then and the
    streak is over. `counts` only needs today and yesterday.
    """
    yesterday = today - timedelta(days=1)
    if counts.get(today, 0) >= habit.times_per_day or counts.get(yesterday, 0) >= habit.times_per_day:
        return habit.current_streak
    return 0
