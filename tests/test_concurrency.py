"""
Interleavings of two sessions on the same rows.

Each test lets a second session commit inside the window between a
read-then-write operation's check and its write.
"""
import pytest
from conftest import TODAY, at

from app.communities import service
from app.communities.models import Community, CommunityMembership
from app.communities.service import create_community, join_by_code
from app.core.errors import ConflictError, NotFoundError
from app.habits import ledger
from app.habits.ledger import record_completion, undo_last_completion
from app.habits.models import UserHabit, Completion


def _bump_version(session_factory, habit_id):
    other = session_factory()
    try:
        other.query(UserHabit).filter(UserHabit.id == habit_id).update(
            {UserHabit.version_id: UserHabit.version_id + 1}, synchronize_session=False,
        )
        other.commit()
    finally:
        other.close()


def test_join_race_leaves_one_membership(db, session_factory, monkeypatch):
    community = create_community(db, "Runners", True, "owner")

    def check_after_other_join(session, community_id, user_id):
        other = session_factory()
        try:
            join_by_code(other, community.code, user_id)
        finally:
            other.close()
        return None

    monkeypatch.setattr(service, "_find_membership", check_after_other_join)

    with pytest.raises(ConflictError):
        join_by_code(db, community.code, "u2")

    check = session_factory()
    try:
        rows = check.query(CommunityMembership).all()
        assert [(m.community_id, m.user_id, m.status) for m in rows] == [
            (community.id, "u2", "pending"),
        ]
    finally:
        check.close()


def test_code_taken_between_check_and_insert_is_retried(db, session_factory, monkeypatch):
    codes = iter(["AAAAAA", "AAAAAA", "BBBBBB"])
    monkeypatch.setattr(service, "generate_code", lambda: next(codes))

    other = session_factory()
    try:
        create_community(other, "First", False, "owner")
    finally:
        other.close()

    monkeypatch.setattr(service, "_code_taken", lambda session, code: False)

    community = create_community(db, "Second", False, "owner")

    assert community.code == "BBBBBB"
    assert sorted(c.code for c in db.query(Community).all()) == ["AAAAAA", "BBBBBB"]


def test_record_conflicts_when_habit_changed_concurrently(db, session_factory, make_habit, monkeypatch):
    habit = make_habit()
    real_recompute = ledger.recompute_streak

    def recompute_after_other_write(session, locked, today):
        _bump_version(session_factory, locked.id)
        return real_recompute(session, locked, today)

    monkeypatch.setattr(ledger, "recompute_streak", recompute_after_other_write)

    with pytest.raises(ConflictError):
        record_completion(db, "alice", habit.id, now=at(TODAY))

    check = session_factory()
    try:
        assert check.query(Completion).count() == 0
        assert check.get(UserHabit, habit.id).current_streak == 0
    finally:
        check.close()


def test_undo_conflicts_when_habit_changed_concurrently(db, session_factory, make_habit, monkeypatch):
    habit = make_habit()
    record_completion(db, "alice", habit.id, now=at(TODAY, 9))
    real_last = ledger._last_completion_on

    def last_after_other_write(session, user_habit_id, day):
        _bump_version(session_factory, user_habit_id)
        return real_last(session, user_habit_id, day)

    monkeypatch.setattr(ledger, "_last_completion_on", last_after_other_write)

    with pytest.raises(ConflictError):
        undo_last_completion(db, "alice", habit.id, now=at(TODAY, 10))

    check = session_factory()
    try:
        assert check.query(Completion).count() == 1
        assert check.get(UserHabit, habit.id).current_streak == 1
    finally:
        check.close()


def test_undo_of_row_removed_concurrently_is_not_found(db, session_factory, make_habit, monkeypatch):
    habit = make_habit()
    record_completion(db, "alice", habit.id, now=at(TODAY, 9))
    real_last = ledger._last_completion_on

    def last_then_removed_elsewhere(session, user_habit_id, day):
        target = real_last(session, user_habit_id, day)
        other = session_factory()
        try:
            other.query(Completion).filter(Completion.id == target.id).delete()
            other.commit()
        finally:
            other.close()
        return target

    monkeypatch.setattr(ledger, "_last_completion_on", last_then_removed_elsewhere)

    with pytest.raises(NotFoundError):
        undo_last_completion(db, "alice", habit.id, now=at(TODAY, 10))

    check = session_factory()
    try:
        assert check.query(Completion).count() == 0
    finally:
        check.close()
