from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.clock import as_utc


class CommunityCreateRequest(BaseModel):
    name: str
    is_private: bool = False


class JoinRequest(BaseModel):
    code: str = Field(..., description="Community code, any case")


class ReviewRequest(BaseModel):
    status: str = Field(..., description="accepted | rejected")


class CommunityOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    code: str
    is_private: bool
    owner_user_id: str
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def _created_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v


class MembershipOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    community_id: int
    user_id: str
    status: str
    joined_at: Optional[datetime] = None

    @field_validator("joined_at")
    @classmethod
    def _joined_at_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v) if v is not None else v


class OwnMembershipOut(MembershipOut):
    """A join request as its requester sees it."""
    community: CommunityOut
