from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.catalog.models import HabitCategory
from app.communities.models import Community, CommunityMembership
from app.db.base import db_diagnostics
from app.db.session import get_db
from app.habits.models import UserHabit, Completion

router = APIRouter(prefix="/debug", tags=["debug"])

COUNTED_TABLES = {
    "habit_categories": HabitCategory,
    "user_habits": UserHabit,
    "habit_completions": Completion,
    "communities": Community,
    "community_members": CommunityMembership,
}


@router.get("/counts")
def debug_counts(db: Session = Depends(get_db)):
    """Row counts per table; no row contents, no user ids."""
    return {
        name: db.query(func.count(model.id)).scalar() or 0
        for name, model in COUNTED_TABLES.items()
    }


@router.get("/diagnostics/db")
def debug_db_diagnostics():
    """Same report as the startup log line. Mounted only with ENABLE_DEBUG_ROUTES=1."""
    return db_diagnostics()
