from sqlalchemy import Column, Integer, String, Text, DateTime, CheckConstraint
from sqlalchemy.sql import func

from app.db.base import Base

KIND_BUILD = "build"
KIND_BREAK = "break"
HABIT_KINDS = (KIND_BUILD, KIND_BREAK)


class HabitCategory(Base):
    """
    Reference list of habits a user can start tracking.

    Administered outside the engine (seed script / migrations); the service
    layer only ever reads these rows.
    """
    __tablename__ = "habit_categories"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)

    # "build" | "break"
    kind = Column(String(16), nullable=False, index=True)

    description = Column(Text, nullable=False, default="")
    methods = Column(Text, nullable=False, default="")

    # Only "break" habits ship with a quote, but nothing forbids one elsewhere
    quote = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("kind IN ('build', 'break')", name="ck_habit_category_kind"),
    )
