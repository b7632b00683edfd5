"""
Community membership service.

Per (community, user) pair:
  none -> pending -> accepted | rejected     (private communities)
  none -> accepted                            (public communities)
The owner sits outside this state machine: authorized by owner_user_id,
never by a membership row.
"""
import logging
import secrets
import string

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.communities.models import (
    Community, CommunityMembership,
    STATUS_PENDING, STATUS_ACCEPTED, STATUS_REJECTED,
)
from app.core.config import COMMUNITY_CODE_LENGTH, COMMUNITY_CODE_MAX_ATTEMPTS
from app.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

CODE_ALPHABET = string.ascii_uppercase + string.digits

REVIEW_OUTCOMES = (STATUS_ACCEPTED, STATUS_REJECTED)


def generate_code(length: int = COMMUNITY_CODE_LENGTH) -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


# ---------------------------------------------------------------------------
# Capability checks
# ---------------------------------------------------------------------------

def is_owner(user_id: str, community: Community) -> bool:
    return community.owner_user_id == user_id


def has_accepted_membership(db: Session, user_id: str, community: Community) -> bool:
    return db.query(CommunityMembership).filter(
        CommunityMembership.community_id == community.id,
        CommunityMembership.user_id == user_id,
        CommunityMembership.status == STATUS_ACCEPTED,
    ).first() is not None


def _get_community(db: Session, community_id: int) -> Community:
    community = db.get(Community, community_id)
    if community is None:
        raise NotFoundError(f"Community {community_id} not found")
    return community


def _code_taken(db: Session, code: str) -> bool:
    return db.query(Community.id).filter(Community.code == code).first() is not None


def _find_membership(db: Session, community_id: int, user_id: str) -> CommunityMembership | None:
    return db.query(CommunityMembership).filter(
        CommunityMembership.community_id == community_id,
        CommunityMembership.user_id == user_id,
    ).first()


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def create_community(db: Session, name: str, is_private: bool, owner_user_id: str) -> Community:
    """
    Create a community with a fresh unique join code.

    Codes are regenerated on collision; the unique index on code catches
    races between the existence check and the insert.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Community name must not be blank")

    for attempt in range(1, COMMUNITY_CODE_MAX_ATTEMPTS + 1):
        code = generate_code()
        if _code_taken(db, code):
            logger.info("[COMMUNITY] code collision attempt=%s", attempt)
            continue

        community = Community(
            name=name,
            code=code,
            is_private=bool(is_private),
            owner_user_id=owner_user_id,
        )
        db.add(community)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info("[COMMUNITY] code collision on insert attempt=%s", attempt)
            continue

        db.refresh(community)
        logger.info("[COMMUNITY] owner=%s created community=%s code=%s private=%s",
                    owner_user_id, community.id, code, community.is_private)
        return community

    raise ConflictError("Could not generate a unique community code, retry")


def join_by_code(db: Session, code: str, user_id: str) -> CommunityMembership:
    community = db.query(Community).filter(Community.code == normalize_code(code)).first()
    if community is None:
        raise NotFoundError("Community not found for that code")

    if is_owner(user_id, community):
        raise ConflictError("You already own this community")

    existing = _find_membership(db, community.id, user_id)
    if existing:
        raise ConflictError(f"Already requested to join (status: {existing.status})")

    membership = CommunityMembership(
        community_id=community.id,
        user_id=user_id,
        status=STATUS_PENDING if community.is_private else STATUS_ACCEPTED,
    )
    db.add(membership)
    try:
        db.commit()
    except IntegrityError:
        # Concurrent join for the same pair won the race
        db.rollback()
        raise ConflictError("Already requested to join")

    db.refresh(membership)
    logger.info("[COMMUNITY] user=%s joined community=%s status=%s",
                user_id, community.id, membership.status)
    return membership


def set_membership_status(
    db: Session,
    community_id: int,
    member_user_id: str,
    new_status: str,
    acting_user_id: str,
) -> CommunityMembership:
    """Owner-only review of a pending request: pending -> accepted | rejected."""
    community = _get_community(db, community_id)
    if not is_owner(acting_user_id, community):
        raise AuthorizationError("Only the community owner can review members")

    new_status = (new_status or "").strip().lower()
    if new_status not in REVIEW_OUTCOMES:
        raise ValidationError(f"status must be one of {', '.join(REVIEW_OUTCOMES)}")

    try:
        membership = (
            db.query(CommunityMembership)
            .filter(
                CommunityMembership.community_id == community.id,
                CommunityMembership.user_id == member_user_id,
            )
            .with_for_update()
            .first()
        )
        if membership is None:
            raise NotFoundError("Membership not found")
        if membership.status != STATUS_PENDING:
            raise ConflictError(f"Membership is already {membership.status}")

        membership.status = new_status
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(membership)
    logger.info("[COMMUNITY] owner=%s set user=%s in community=%s to %s",
                acting_user_id, member_user_id, community.id, new_status)
    return membership


def visible_communities_for(db: Session, user_id: str) -> list[Community]:
    """Communities the user owns plus those where they are an accepted member."""
    accepted_ids = select(CommunityMembership.community_id).where(
        CommunityMembership.user_id == user_id,
        CommunityMembership.status == STATUS_ACCEPTED,
    )
    return (
        db.query(Community)
        .filter(or_(
            Community.owner_user_id == user_id,
            Community.id.in_(accepted_ids),
        ))
        .order_by(Community.created_at.desc(), Community.id.desc())
        .all()
    )


def list_members(db: Session, community_id: int, acting_user_id: str) -> list[CommunityMembership]:
    """
    Owner sees every request; an accepted member sees the accepted roster.
    Anyone else is refused.
    """
    community = _get_community(db, community_id)
    query = db.query(CommunityMembership).filter(CommunityMembership.community_id == community.id)

    if is_owner(acting_user_id, community):
        pass
    elif has_accepted_membership(db, acting_user_id, community):
        query = query.filter(CommunityMembership.status == STATUS_ACCEPTED)
    else:
        raise AuthorizationError("Not a member of this community")

    return query.order_by(CommunityMembership.joined_at.asc(), CommunityMembership.id.asc()).all()


def memberships_for(db: Session, user_id: str) -> list[CommunityMembership]:
    """The user's own join requests in every status, each with its community."""
    return (
        db.query(CommunityMembership)
        .options(joinedload(CommunityMembership.community))
        .filter(CommunityMembership.user_id == user_id)
        .order_by(CommunityMembership.joined_at.desc(), CommunityMembership.id.desc())
        .all()
    )
