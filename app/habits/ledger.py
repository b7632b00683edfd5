"""
Completion ledger.

Completions are append-only; the only removal is "undo the most recent
completion of a day". Every mutation locks the owning habit row, appends or
deletes, recomputes the streak and commits as one unit.
"""
import logging
from datetime import date, datetime
from typing import Iterable

from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.clock import as_utc, utcnow, local_date, local_today, day_bounds_utc
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.habits.models import UserHabit, Completion
from app.habits.registry import get_owned_habit
from app.habits.schemas import CompletionOut, CompletionResult
from app.habits.streaks import recompute_streak

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

def completions_on(db: Session, user_habit_id: int, day: date) -> int:
    start, end = day_bounds_utc(day)
    return (
        db.query(func.count(Completion.id))
        .filter(
            Completion.user_habit_id == user_habit_id,
            Completion.completed_at >= start,
            Completion.completed_at < end,
        )
        .scalar()
    ) or 0


def completions_in_range(
    db: Session,
    user_habit_ids: Iterable[int],
    from_inclusive: date,
    to_exclusive: date,
) -> list[Completion]:
    """All completions of several habits between two local days, in one query."""
    ids = list(user_habit_ids)
    if not ids or to_exclusive <= from_inclusive:
        return []
    start, _ = day_bounds_utc(from_inclusive)
    end, _ = day_bounds_utc(to_exclusive)
    return (
        db.query(Completion)
        .filter(
            Completion.user_habit_id.in_(ids),
            Completion.completed_at >= start,
            Completion.completed_at < end,
        )
        .order_by(Completion.completed_at.asc(), Completion.id.asc())
        .all()
    )


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------

def _last_completion_on(db: Session, user_habit_id: int, day: date) -> Completion | None:
    start, end = day_bounds_utc(day)
    return (
        db.query(Completion)
        .filter(
            Completion.user_habit_id == user_habit_id,
            Completion.completed_at >= start,
            Completion.completed_at < end,
        )
        .order_by(Completion.id.desc())
        .first()
    )


def _result(db: Session, habit: UserHabit, completion: CompletionOut, day: date) -> CompletionResult:
    done = completions_on(db, habit.id, day)
    return CompletionResult(
        completion=completion,
        user_habit_id=habit.id,
        day=day,
        completions_on_day=done,
        times_per_day=habit.times_per_day,
        qualifies=done >= habit.times_per_day,
        over_target=done > habit.times_per_day,
        current_streak=habit.current_streak,
        best_streak=habit.best_streak,
    )


def record_completion(
    db: Session,
    user_id: str,
    user_habit_id: int,
    amount: int | None = None,
    now: datetime | None = None,
) -> CompletionResult:
    """
    Append a completion stamped `now` and recompute the habit's streak.

    amount falls back to the habit's custom_amount, then 1. Going past
    times_per_day is allowed and reported as over_target.
    """
    now = as_utc(now or utcnow())
    today = local_date(now)

    try:
        habit = get_owned_habit(db, user_id, user_habit_id, lock=True)
        if not habit.is_active:
            raise ValidationError("Habit is not active")

        if amount is None:
            amount = habit.custom_amount or 1
        if amount < 1:
            raise ValidationError("amount must be at least 1")

        completion = Completion(user_habit_id=habit.id, completed_at=now, amount=amount)
        db.add(completion)
        recompute_streak(db, habit, today)
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning("[LEDGER] concurrent update on habit=%s while recording", user_habit_id)
        raise ConflictError("Habit was modified concurrently, retry")
    except Exception:
        db.rollback()
        raise

    db.refresh(completion)
    logger.info("[LEDGER] user=%s habit=%s recorded completion=%s amount=%s",
                user_id, habit.id, completion.id, amount)
    return _result(db, habit, CompletionOut.model_validate(completion), today)


def undo_last_completion(
    db: Session,
    user_id: str,
    user_habit_id: int,
    on_day: date | None = None,
    now: datetime | None = None,
) -> CompletionResult:
    """
    Delete the most recently created completion within `on_day` (default today).

    Raises NotFoundError, leaving the ledger untouched, when the habit has no
    completion on that day.
    """
    now = as_utc(now or utcnow())
    today = local_date(now)
    day = on_day or local_today(now)

    try:
        habit = get_owned_habit(db, user_id, user_habit_id, lock=True)

        target = _last_completion_on(db, habit.id, day)
        if target is None:
            raise NotFoundError(f"No completion to undo on {day.isoformat()}")

        removed = CompletionOut.model_validate(target)
        deleted = (
            db.query(Completion)
            .filter(Completion.id == target.id)
            .delete(synchronize_session="fetch")
        )
        if deleted == 0:
            # Another undo removed it between our read and delete
            raise NotFoundError(f"No completion to undo on {day.isoformat()}")

        recompute_streak(db, habit, today)
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning("[LEDGER] concurrent update on habit=%s while undoing", user_habit_id)
        raise ConflictError("Habit was modified concurrently, retry")
    except Exception:
        db.rollback()
        raise

    logger.info("[LEDGER] user=%s habit=%s undid completion=%s day=%s",
                user_id, habit.id, removed.id, day)
    return _result(db, habit, removed, day)
