from collections import Counter
from datetime import timedelta

from conftest import TODAY, at

from app.habits.ledger import record_completion, undo_last_completion
from app.habits.streaks import current_streak_from_counts, live_streak

YESTERDAY = TODAY - timedelta(days=1)


def _days_ago(n):
    return TODAY - timedelta(days=n)


def test_no_completions_means_no_streak():
    assert current_streak_from_counts(Counter(), 1, TODAY) == 0


def test_unfinished_today_keeps_chain_ending_yesterday():
    counts = Counter({_days_ago(1): 1, _days_ago(2): 1})
    assert current_streak_from_counts(counts, 1, TODAY) == 2


def test_today_counts_once_it_qualifies():
    counts = Counter({TODAY: 2, _days_ago(1): 2, _days_ago(2): 1})
    # day -2 is below target and ends the chain
    assert current_streak_from_counts(counts, 2, TODAY) == 2


def test_gap_before_yesterday_breaks_chain():
    counts = Counter({_days_ago(2): 1, _days_ago(3): 1})
    assert current_streak_from_counts(counts, 1, TODAY) == 0


def test_three_per_day_target_increments_by_one_over_yesterday(db, make_habit):
    habit = make_habit(times_per_day=3, created=_days_ago(5))

    for _ in range(3):
        result = record_completion(db, "alice", habit.id, now=at(YESTERDAY))
    assert result.current_streak == 1

    first = record_completion(db, "alice", habit.id, now=at(TODAY, 9))
    second = record_completion(db, "alice", habit.id, now=at(TODAY, 10))
    assert first.current_streak == 1
    assert second.current_streak == 1
    assert not second.qualifies

    third = record_completion(db, "alice", habit.id, now=at(TODAY, 11))
    assert third.completions_on_day == 3
    assert third.qualifies
    assert third.current_streak == 2
    assert third.best_streak == 2


def test_streak_restarts_at_one_after_gap(db, make_habit):
    habit = make_habit(created=_days_ago(10))
    for n in (6, 5, 4):
        record_completion(db, "alice", habit.id, now=at(_days_ago(n)))

    result = record_completion(db, "alice", habit.id, now=at(TODAY))

    assert result.current_streak == 1
    assert result.best_streak == 3


def test_undo_recomputes_and_best_never_drops(db, make_habit):
    habit = make_habit(created=_days_ago(5))
    for n in (2, 1, 0):
        result = record_completion(db, "alice", habit.id, now=at(_days_ago(n)))
    assert (result.current_streak, result.best_streak) == (3, 3)

    undone = undo_last_completion(db, "alice", habit.id, now=at(TODAY, 13))

    assert undone.current_streak == 2
    assert undone.best_streak == 3
    assert undone.best_streak >= undone.current_streak


def test_best_at_least_current_after_every_mutation(db, make_habit):
    habit = make_habit(times_per_day=2, created=_days_ago(4))
    steps = [
        ("record", _days_ago(3)), ("record", _days_ago(3)),
        ("record", _days_ago(2)), ("undo", _days_ago(2)),
        ("record", _days_ago(1)), ("record", _days_ago(1)),
        ("record", TODAY), ("record", TODAY), ("undo", TODAY),
    ]
    for action, day in steps:
        if action == "record":
            result = record_completion(db, "alice", habit.id, now=at(day))
        else:
            result = undo_last_completion(db, "alice", habit.id, now=at(day, 18))
        assert result.best_streak >= result.current_streak >= 0


def test_live_streak_is_zero_once_days_were_skipped(db, make_habit):
    habit = make_habit(created=_days_ago(5))
    record_completion(db, "alice", habit.id, now=at(_days_ago(3)))
    record_completion(db, "alice", habit.id, now=at(_days_ago(2)))
    db.refresh(habit)

    assert habit.current_streak == 2
    assert live_streak(habit, Counter({_days_ago(2): 1}), _days_ago(1)) == 2
    assert live_streak(habit, Counter(), TODAY) == 0
