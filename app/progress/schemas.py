import datetime
from typing import List

from pydantic import BaseModel, Field


class DayStat(BaseModel):
    date: datetime.date
    completion_rate: int = Field(..., description="0-100, share of eligible habits done that day")
    completed_count: int
    total_eligible: int


class HabitProgress(BaseModel):
    user_habit_id: int
    category_name: str
    kind: str
    current_streak: int
    best_streak: int
    days_active: int
    total_completions: int
    # completion events over elapsed days, not qualifying days
    success_rate: int
    last_7_days: List[bool] = Field(..., description="Had at least one completion, oldest first")
