from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.clock import as_utc


class HabitStartRequest(BaseModel):
    habit_category_id: int
    times_per_day: int = Field(1, description="Daily target; a day qualifies once reached")
    custom_amount: Optional[int] = Field(None, description="Default amount per completion")
    reminder_times: List[str] = Field(default_factory=list, description="Ordered HH:MM values")


class CompletionRequest(BaseModel):
    amount: Optional[int] = None


class CompletionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_habit_id: int
    completed_at: datetime
    amount: int

    @field_validator("completed_at")
    @classmethod
    def _completed_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class UserHabitOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    habit_category_id: int
    is_active: bool
    current_streak: int
    best_streak: int
    times_per_day: int
    custom_amount: Optional[int] = None
    reminder_times: List[str]
    created_at: datetime

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ActiveHabitOut(UserHabitOut):
    category_name: str
    kind: str
    completions_today: int
    over_target: bool


class CompletionResult(BaseModel):
    """What a ledger mutation changed, so callers need no second read."""
    completion: CompletionOut
    user_habit_id: int
    day: date
    completions_on_day: int
    times_per_day: int
    qualifies: bool
    over_target: bool
    current_streak: int
    best_streak: int
