"""
API routes for habit progress.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.deps import get_current_user_id
from app.db.session import get_db
from app.progress.aggregator import weekly_tracker, habit_progress, progress_overview
from app.progress.schemas import DayStat, HabitProgress

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("/weekly", response_model=List[DayStat])
def get_weekly_tracker(
    habit_id: Optional[List[int]] = Query(None, description="Defaults to all active habits"),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return weekly_tracker(db, user_id, habit_ids=habit_id)


@router.get("/habits", response_model=List[HabitProgress])
def get_progress_overview(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return progress_overview(db, user_id)


@router.get("/habits/{user_habit_id}", response_model=HabitProgress)
def get_habit_progress(
    user_habit_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return habit_progress(db, user_id, user_habit_id)
