from datetime import timedelta

import pytest
from conftest import TODAY, at

from app.core.errors import AuthorizationError, NotFoundError
from app.habits.ledger import record_completion
from app.habits.registry import deactivate_habit
from app.progress.aggregator import habit_progress, percent, progress_overview, weekly_tracker

YESTERDAY = TODAY - timedelta(days=1)


def test_percent_rounds_half_up():
    assert percent(1, 8) == 13
    assert percent(2, 3) == 67
    assert percent(1, 3) == 33
    assert percent(0, 0) == 0


def test_weekly_tracker_yesterday_scenario(db, make_habit):
    old = make_habit(created=TODAY - timedelta(days=3))
    new = make_habit(created=TODAY)
    record_completion(db, "alice", old.id, now=at(YESTERDAY))

    stats = weekly_tracker(db, "alice", [old.id, new.id], today=TODAY)

    assert [s.date for s in stats] == [TODAY - timedelta(days=n) for n in range(6, -1, -1)]
    yesterday = stats[-2]
    assert yesterday.date == YESTERDAY
    assert yesterday.total_eligible == 1
    assert yesterday.completed_count == 1
    assert yesterday.completion_rate == 100

    today = stats[-1]
    assert (today.total_eligible, today.completed_count, today.completion_rate) == (2, 0, 0)


def test_days_before_any_habit_have_zero_rate(db, make_habit):
    make_habit(created=TODAY - timedelta(days=1))

    stats = weekly_tracker(db, "alice", today=TODAY)

    for stat in stats[:5]:
        assert stat.total_eligible == 0
        assert stat.completion_rate == 0


def test_weekly_tracker_counts_distinct_habits(db, make_habit):
    first = make_habit(times_per_day=3, created=TODAY - timedelta(days=10))
    second = make_habit(created=TODAY - timedelta(days=10))
    third = make_habit(created=TODAY - timedelta(days=10))
    for _ in range(2):
        record_completion(db, "alice", first.id, now=at(TODAY))
    record_completion(db, "alice", second.id, now=at(TODAY))

    today = weekly_tracker(db, "alice", today=TODAY)[-1]

    # partial completion still counts toward the tracker
    assert (today.completed_count, today.total_eligible, today.completion_rate) == (2, 3, 67)
    assert third.id not in (first.id, second.id)


def test_weekly_tracker_is_repeatable(db, make_habit):
    habit = make_habit(created=TODAY - timedelta(days=4))
    record_completion(db, "alice", habit.id, now=at(TODAY - timedelta(days=2)))

    assert weekly_tracker(db, "alice", today=TODAY) == weekly_tracker(db, "alice", today=TODAY)


def test_weekly_tracker_defaults_to_active_habits(db, make_habit):
    active = make_habit(created=TODAY - timedelta(days=2))
    dropped = make_habit(created=TODAY - timedelta(days=2))
    record_completion(db, "alice", dropped.id, now=at(TODAY))
    deactivate_habit(db, "alice", dropped.id)

    today = weekly_tracker(db, "alice", today=TODAY)[-1]

    assert today.total_eligible == 1
    assert today.completed_count == 0
    assert active.is_active


def test_weekly_tracker_checks_habit_ownership(db, make_habit):
    theirs = make_habit(user_id="bob")

    with pytest.raises(AuthorizationError):
        weekly_tracker(db, "alice", [theirs.id], today=TODAY)
    with pytest.raises(NotFoundError):
        weekly_tracker(db, "alice", [424242], today=TODAY)


def test_habit_progress(db, make_habit):
    habit = make_habit(created=TODAY - timedelta(days=9))
    record_completion(db, "alice", habit.id, now=at(TODAY - timedelta(days=8)))
    record_completion(db, "alice", habit.id, now=at(TODAY - timedelta(days=2)))
    record_completion(db, "alice", habit.id, now=at(YESTERDAY))
    record_completion(db, "alice", habit.id, now=at(YESTERDAY))

    progress = habit_progress(db, "alice", habit.id, today=TODAY)

    assert progress.days_active == 10
    assert progress.total_completions == 4
    assert progress.success_rate == 40
    assert progress.last_7_days == [False, False, False, False, True, True, False]
    assert progress.current_streak == 2
    assert progress.best_streak == 2
    assert progress.category_name


def test_habit_progress_created_today(db, make_habit):
    habit = make_habit(created=TODAY)
    record_completion(db, "alice", habit.id, now=at(TODAY))
    record_completion(db, "alice", habit.id, now=at(TODAY))

    progress = habit_progress(db, "alice", habit.id, today=TODAY)

    assert progress.days_active == 1
    # event count, not qualifying days, so it can exceed 100
    assert progress.success_rate == 200
    assert progress.last_7_days[-1] is True


def test_progress_overview_lists_active_habits(db, make_habit):
    first = make_habit(created=TODAY - timedelta(days=1))
    second = make_habit(created=TODAY)
    make_habit(user_id="bob")

    overview = progress_overview(db, "alice", today=TODAY)

    assert [p.user_habit_id for p in overview] == [first.id, second.id]
