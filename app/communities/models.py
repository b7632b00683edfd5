from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.config import COMMUNITY_CODE_MAX_LENGTH
from app.db.base import Base

STATUS_PENDING = "pending"
STATUS_ACCEPTED = "accepted"
STATUS_REJECTED = "rejected"
MEMBERSHIP_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_REJECTED)


class Community(Base):
    __tablename__ = "communities"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String(255), nullable=False)

    # Always stored uppercase; lookups uppercase the input first
    code = Column(String(COMMUNITY_CODE_MAX_LENGTH), nullable=False, unique=True, index=True)

    is_private = Column(Boolean, nullable=False, default=False)

    # The owner never holds a membership row
    owner_user_id = Column(String(128), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class CommunityMembership(Base):
    """Join request / membership of a non-owner participant."""
    __tablename__ = "community_members"

    id = Column(Integer, primary_key=True, index=True)

    community_id = Column(
        Integer,
        ForeignKey("communities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(128), nullable=False, index=True)

    # pending | accepted | rejected
    status = Column(String(16), nullable=False, default=STATUS_PENDING)

    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    community = relationship("Community")

    # One row per (community, user), whatever its status
    __table_args__ = (
        UniqueConstraint("community_id", "user_id", name="uq_community_member"),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'rejected')",
            name="ck_community_member_status",
        ),
    )
