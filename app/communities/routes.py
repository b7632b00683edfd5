from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.communities.schemas import (
    CommunityCreateRequest, CommunityOut, JoinRequest, MembershipOut, OwnMembershipOut, ReviewRequest,
)
from app.communities.service import (
    create_community, join_by_code, set_membership_status, visible_communities_for, list_members,
    memberships_for,
)
from app.core.deps import get_current_user_id
from app.db.session import get_db

router = APIRouter(prefix="/communities", tags=["communities"])


@router.post("", response_model=CommunityOut, status_code=201)
def create(
    body: CommunityCreateRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return create_community(db, body.name, body.is_private, user_id)


@router.get("", response_model=List[CommunityOut])
def visible(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return visible_communities_for(db, user_id)


@router.get("/memberships", response_model=List[OwnMembershipOut])
def my_memberships(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return memberships_for(db, user_id)


@router.post("/join", response_model=MembershipOut, status_code=201)
def join(
    body: JoinRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return join_by_code(db, body.code, user_id)


@router.post("/{community_id}/members/{member_user_id}/status", response_model=MembershipOut)
def review_membership(
    community_id: int,
    member_user_id: str,
    body: ReviewRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return set_membership_status(db, community_id, member_user_id, body.status, user_id)


@router.get("/{community_id}/members", response_model=List[MembershipOut])
def members(
    community_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return list_members(db, community_id, user_id)
