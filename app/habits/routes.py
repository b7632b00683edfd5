from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user_id
from app.db.session import get_db
from app.habits.ledger import record_completion, undo_last_completion
from app.habits.registry import start_habit, list_active_habits, deactivate_habit
from app.habits.schemas import (
    ActiveHabitOut, CompletionRequest, CompletionResult, HabitStartRequest, UserHabitOut,
)

router = APIRouter(prefix="/habits", tags=["habits"])


# ======================================================
# START / LIST / DEACTIVATE
# ======================================================
@router.post("", response_model=UserHabitOut, status_code=201)
def start_tracking(
    body: HabitStartRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return start_habit(
        db,
        user_id,
        body.habit_category_id,
        times_per_day=body.times_per_day,
        custom_amount=body.custom_amount,
        reminder_times=body.reminder_times,
    )


@router.get("", response_model=List[ActiveHabitOut])
def get_active_habits(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return list_active_habits(db, user_id)


@router.post("/{user_habit_id}/deactivate", response_model=UserHabitOut)
def deactivate(
    user_habit_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return deactivate_habit(db, user_id, user_habit_id)


# ======================================================
# COMPLETIONS
# ======================================================
@router.post("/{user_habit_id}/completions", response_model=CompletionResult, status_code=201)
def record(
    user_habit_id: int,
    body: Optional[CompletionRequest] = None,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    amount = body.amount if body else None
    return record_completion(db, user_id, user_habit_id, amount=amount)


@router.delete("/{user_habit_id}/completions/last", response_model=CompletionResult)
def undo_last(
    user_habit_id: int,
    day: Optional[date] = Query(None, description="Local day, defaults to today"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return undo_last_completion(db, user_id, user_habit_id, on_day=day)
