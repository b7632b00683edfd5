from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, JSON, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.base import Base


class UserHabit(Base):
    """
    A habit category a user has started tracking.

    current_streak / best_streak are derived from the completion ledger and
    rewritten after every ledger mutation. Abandoned habits are deactivated,
    never deleted, so their history stays intact.
    """
    __tablename__ = "user_habits"

    id = Column(Integer, primary_key=True, index=True)

    # Opaque id from the identity provider
    owner_user_id = Column(String(128), nullable=False, index=True)
    habit_category_id = Column(Integer, ForeignKey("habit_categories.id"), nullable=False)

    is_active = Column(Boolean, nullable=False, default=True)

    current_streak = Column(Integer, nullable=False, default=0)
    best_streak = Column(Integer, nullable=False, default=0)

    times_per_day = Column(Integer, nullable=False, default=1)
    custom_amount = Column(Integer, nullable=True)

    # Ordered list of "HH:MM" strings; duplicates allowed
    reminder_times = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Optimistic concurrency: every UPDATE checks and bumps this
    version_id = Column(Integer, nullable=False)

    category = relationship("HabitCategory", lazy="joined")

    __mapper_args__ = {"version_id_col": version_id}

    __table_args__ = (
        CheckConstraint("times_per_day >= 1", name="ck_user_habit_times_per_day"),
        CheckConstraint("best_streak >= current_streak", name="ck_user_habit_best_streak"),
    )


class Completion(Base):
    """One append-only completion event. Removed only by undo-last."""
    __tablename__ = "habit_completions"

    id = Column(Integer, primary_key=True, index=True)

    user_habit_id = Column(
        Integer,
        ForeignKey("user_habits.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Stored in UTC; bucketed into local days by app.core.clock
    completed_at = Column(DateTime(timezone=True), nullable=False)

    amount = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("ix_habit_completions_habit_time", "user_habit_id", "completed_at"),
        CheckConstraint("amount >= 1", name="ck_completion_amount"),
    )
