"""
Read-only progress statistics over the completion ledger.

Two independent metrics live here:
  - weekly tracker: per day, share of eligible habits with >= 1 completion
  - habit progress: completion events per elapsed day since the habit started
Neither uses the streak engine's qualifying-day rule.
"""
import math
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.clock import local_date, local_today, trailing_days
from app.habits.ledger import completions_in_range
from app.habits.models import UserHabit, Completion
from app.habits.registry import active_habits_for, get_owned_habit, get_owned_habits
from app.habits.streaks import live_streak
from app.progress.schemas import DayStat, HabitProgress

WINDOW_DAYS = 7


def percent(part: int, whole: int) -> int:
    """100 * part / whole rounded half up; 0 when whole is 0."""
    if whole <= 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def _daily_counts_by_habit(completions: Iterable[Completion]) -> dict[int, Counter]:
    counts: dict[int, Counter] = defaultdict(Counter)
    for c in completions:
        counts[c.user_habit_id][local_date(c.completed_at)] += 1
    return counts


def weekly_tracker(
    db: Session,
    user_id: str,
    habit_ids: Iterable[int] | None = None,
    today: date | None = None,
) -> list[DayStat]:
    """
    Seven DayStat for the trailing week including today, oldest first.

    habit_ids=None means all of the user's active habits. A habit counts
    toward a day only if it already existed on that day.
    """
    today = today or local_today()
    if habit_ids is None:
        habits = active_habits_for(db, user_id)
    else:
        habits = get_owned_habits(db, user_id, habit_ids)

    days = trailing_days(today, WINDOW_DAYS)
    created = {h.id: local_date(h.created_at) for h in habits}
    counts = _daily_counts_by_habit(
        completions_in_range(db, created.keys(), days[0], today + timedelta(days=1))
    )

    stats = []
    for day in days:
        eligible = [habit_id for habit_id, started in created.items() if started <= day]
        completed = sum(1 for habit_id in eligible if counts[habit_id][day] > 0)
        stats.append(DayStat(
            date=day,
            completion_rate=percent(completed, len(eligible)),
            completed_count=completed,
            total_eligible=len(eligible),
        ))
    return stats


def _progress_for(habits: list[UserHabit], db: Session, today: date) -> list[HabitProgress]:
    ids = [h.id for h in habits]
    if not ids:
        return []

    totals = dict(
        db.query(Completion.user_habit_id, func.count(Completion.id))
        .filter(Completion.user_habit_id.in_(ids))
        .group_by(Completion.user_habit_id)
        .all()
    )
    days = trailing_days(today, WINDOW_DAYS)
    counts = _daily_counts_by_habit(
        completions_in_range(db, ids, days[0], today + timedelta(days=1))
    )

    result = []
    for habit in habits:
        days_active = max((today - local_date(habit.created_at)).days + 1, 1)
        total = totals.get(habit.id, 0)
        result.append(HabitProgress(
            user_habit_id=habit.id,
            category_name=habit.category.name,
            kind=habit.category.kind,
            current_streak=live_streak(habit, counts[habit.id], today),
            best_streak=habit.best_streak,
            days_active=days_active,
            total_completions=total,
            success_rate=percent(total, days_active),
            last_7_days=[counts[habit.id][day] > 0 for day in days],
        ))
    return result


def habit_progress(db: Session, user_id: str, user_habit_id: int, today: date | None = None) -> HabitProgress:
    habit = get_owned_habit(db, user_id, user_habit_id)
    return _progress_for([habit], db, today or local_today())[0]


def progress_overview(db: Session, user_id: str, today: date | None = None) -> list[HabitProgress]:
    """habit_progress for every active habit of the user, batched."""
    return _progress_for(active_habits_for(db, user_id), db, today or local_today())
