"""
User habit registry: start, look up, list and deactivate tracked habits.
"""
import logging
import re
from collections import Counter, defaultdict
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy.orm import Session

from app.catalog.catalog import get_category
from app.core.clock import as_utc, utcnow, local_date, local_today, day_bounds_utc
from app.core.errors import AuthorizationError, NotFoundError, ValidationError
from app.habits.models import UserHabit, Completion
from app.habits.streaks import live_streak

logger = logging.getLogger(__name__)

_REMINDER_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def normalize_reminder_times(values: Iterable[str]) -> list[str]:
    """
    Validate reminder times as HH:MM (00:00-23:59).

    Blank entries are dropped; order and duplicates are kept.
    """
    result = []
    for raw in values:
        value = (raw or "").strip()
        if not value:
            continue
        if not _REMINDER_RE.match(value):
            raise ValidationError(f"Invalid reminder time '{raw}', expected HH:MM")
        result.append(value)
    return result


def start_habit(
    db: Session,
    user_id: str,
    category_id: int,
    times_per_day: int = 1,
    custom_amount: int | None = None,
    reminder_times: Iterable[str] = (),
    now: datetime | None = None,
) -> UserHabit:
    if times_per_day is None or times_per_day < 1:
        raise ValidationError("times_per_day must be at least 1")
    if custom_amount is not None and custom_amount < 1:
        raise ValidationError("custom_amount must be at least 1")
    reminders = normalize_reminder_times(reminder_times)

    get_category(db, category_id)

    habit = UserHabit(
        owner_user_id=user_id,
        habit_category_id=category_id,
        is_active=True,
        current_streak=0,
        best_streak=0,
        times_per_day=times_per_day,
        custom_amount=custom_amount,
        reminder_times=reminders,
        created_at=as_utc(now or utcnow()),
    )
    db.add(habit)
    db.commit()
    db.refresh(habit)
    logger.info("[HABIT] user=%s started habit=%s category=%s target=%s",
                user_id, habit.id, category_id, times_per_day)
    return habit


def get_owned_habit(db: Session, user_id: str, user_habit_id: int, lock: bool = False) -> UserHabit:
    """
    Load a habit and check ownership.

    With lock=True the row is selected FOR UPDATE so ledger writers on the
    same habit serialize until the transaction ends.
    """
    query = db.query(UserHabit).filter(UserHabit.id == user_habit_id)
    if lock:
        # the joined category load cannot be part of a FOR UPDATE on every backend
        query = query.enable_eagerloads(False).with_for_update().populate_existing()
    habit = query.first()

    if habit is None:
        raise NotFoundError(f"Habit {user_habit_id} not found")
    if habit.owner_user_id != user_id:
        raise AuthorizationError("Habit belongs to another user")
    return habit


def get_owned_habits(db: Session, user_id: str, user_habit_ids: Iterable[int]) -> list[UserHabit]:
    """Several habits at once, same checks as get_owned_habit. Keeps input order."""
    wanted = list(dict.fromkeys(user_habit_ids))
    if not wanted:
        return []
    rows = db.query(UserHabit).filter(UserHabit.id.in_(wanted)).all()
    by_id = {h.id: h for h in rows}

    missing = [i for i in wanted if i not in by_id]
    if missing:
        raise NotFoundError(f"Habit {missing[0]} not found")
    if any(h.owner_user_id != user_id for h in rows):
        raise AuthorizationError("Habit belongs to another user")
    return [by_id[i] for i in wanted]


def active_habits_for(db: Session, user_id: str) -> list[UserHabit]:
    return (
        db.query(UserHabit)
        .filter(UserHabit.owner_user_id == user_id, UserHabit.is_active.is_(True))
        .order_by(UserHabit.created_at.asc(), UserHabit.id.asc())
        .all()
    )


def list_active_habits(db: Session, user_id: str, now: datetime | None = None) -> list[dict]:
    """Active habits with today's completion count (one ledger query)."""
    habits = active_habits_for(db, user_id)
    if not habits:
        return []

    today = local_today(now)
    start, _ = day_bounds_utc(today - timedelta(days=1))
    _, end = day_bounds_utc(today)
    rows = (
        db.query(Completion.user_habit_id, Completion.completed_at)
        .filter(
            Completion.user_habit_id.in_([h.id for h in habits]),
            Completion.completed_at >= start,
            Completion.completed_at < end,
        )
        .all()
    )
    counts: dict[int, Counter] = defaultdict(Counter)
    for habit_id, completed_at in rows:
        counts[habit_id][local_date(completed_at)] += 1

    result = []
    for habit in habits:
        done = counts[habit.id][today]
        result.append({
            "id": habit.id,
            "habit_category_id": habit.habit_category_id,
            "category_name": habit.category.name,
            "kind": habit.category.kind,
            "is_active": habit.is_active,
            "current_streak": live_streak(habit, counts[habit.id], today),
            "best_streak": habit.best_streak,
            "times_per_day": habit.times_per_day,
            "custom_amount": habit.custom_amount,
            "reminder_times": list(habit.reminder_times or []),
            "created_at": habit.created_at,
            "completions_today": done,
            "over_target": done > habit.times_per_day,
        })
    return result


def deactivate_habit(db: Session, user_id: str, user_habit_id: int) -> UserHabit:
    habit = get_owned_habit(db, user_id, user_habit_id)
    if habit.is_active:
        habit.is_active = False
        db.commit()
        db.refresh(habit)
        logger.info("[HABIT] user=%s deactivated habit=%s", user_id, user_habit_id)
    return habit
