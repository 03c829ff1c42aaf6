"""Unit tests for Streak System (progress_engine/gamification/streak_system.py)"""
import pytest
from datetime import date, datetime, timezone

from progress_engine.gamification.streak_system import (
    DayRelation,
    apply_streak,
    classify_day,
    update_streak,
)


# ============================================================================
# Day Classification Tests
# ============================================================================

def test_classify_day_no_prior_activity():
    """Test a user's first ever session counts as a gap"""
    assert classify_day(None, date(2024, 3, 1)) == DayRelation.GAP


def test_classify_day_same_day():
    """Test two sessions on one civil date"""
    assert classify_day(date(2024, 3, 1), date(2024, 3, 1)) == DayRelation.SAME_DAY


def test_classify_day_next_day():
    """Test consecutive civil dates"""
    assert classify_day(date(2024, 3, 1), date(2024, 3, 2)) == DayRelation.NEXT_DAY


def test_classify_day_across_month_and_leap_day():
    """Test calendar arithmetic across month ends and Feb 29"""
    assert classify_day(date(2024, 2, 28), date(2024, 2, 29)) == DayRelation.NEXT_DAY
    assert classify_day(date(2024, 2, 29), date(2024, 3, 1)) == DayRelation.NEXT_DAY
    assert classify_day(date(2023, 12, 31), date(2024, 1, 1)) == DayRelation.NEXT_DAY


def test_classify_day_gap():
    """Test a skipped civil date breaks the streak"""
    assert classify_day(date(2024, 3, 1), date(2024, 3, 3)) == DayRelation.GAP


def test_classify_day_late_event():
    """Test an event dated before the last active day does not rewind the streak"""
    assert classify_day(date(2024, 3, 5), date(2024, 3, 4)) == DayRelation.SAME_DAY


# ============================================================================
# Streak Update Tests
# ============================================================================

def test_update_streak_first_activity(fresh_progress, utc):
    """Test first activity creates streak of 1"""
    update = update_streak(fresh_progress, utc(2024, 3, 1, 9))

    assert update.relation == DayRelation.GAP
    assert update.current_streak == 1
    assert update.longest_streak == 1
    assert update.is_first_session_today is True
    assert update.milestone_reached is None


def test_update_streak_consecutive_day(progress_on_day, utc):
    """Test consecutive day activity increments streak"""
    progress = progress_on_day(date(2024, 3, 1), streak=5, longest=10)

    update = update_streak(progress, utc(2024, 3, 2, 8))

    assert update.relation == DayRelation.NEXT_DAY
    assert update.current_streak == 6
    assert update.longest_streak == 10  # Unchanged
    assert update.is_first_session_today is True


def test_update_streak_same_day_no_change(progress_on_day, utc):
    """Test activity on same day doesn't increment streak again"""
    progress = progress_on_day(date(2024, 3, 1), streak=3, longest=5)

    update = update_streak(progress, utc(2024, 3, 1, 22))

    assert update.relation == DayRelation.SAME_DAY
    assert update.current_streak == 3
    assert update.is_first_session_today is False


def test_update_streak_gap_resets(progress_on_day, utc):
    """Test a missed day restarts the streak at 1 and keeps the record"""
    progress = progress_on_day(date(2024, 3, 1), streak=12)

    update = update_streak(progress, utc(2024, 3, 4, 12))

    assert update.relation == DayRelation.GAP
    assert update.previous_streak == 12
    assert update.current_streak == 1
    assert update.longest_streak == 12


def test_update_streak_new_record(progress_on_day, utc):
    """Test longest streak follows the current streak once it is exceeded"""
    progress = progress_on_day(date(2024, 3, 1), streak=4, longest=4)

    update = update_streak(progress, utc(2024, 3, 2, 12))

    assert update.longest_streak == 5


def test_update_streak_just_before_and_after_midnight(progress_on_day, utc):
    """Test 23:59:30 then 00:00:30 is the next day despite a one-minute gap"""
    progress = progress_on_day(date(2024, 3, 1), streak=2)

    update = update_streak(progress, datetime(2024, 3, 2, 0, 0, 30, tzinfo=timezone.utc))

    assert update.relation == DayRelation.NEXT_DAY
    assert update.current_streak == 3


def test_update_streak_late_on_next_day(progress_on_day, utc):
    """Test 00:00:30 then 23:59:30 the next day is still only the next day"""
    progress = progress_on_day(date(2024, 3, 1), streak=1)

    update = update_streak(progress, datetime(2024, 3, 2, 23, 59, 30, tzinfo=timezone.utc))

    assert update.relation == DayRelation.NEXT_DAY


def test_update_streak_does_not_mutate(progress_on_day, utc):
    """Test update_streak leaves the aggregate untouched"""
    progress = progress_on_day(date(2024, 3, 1), streak=5)

    update_streak(progress, utc(2024, 3, 2, 12))

    assert progress.current_streak == 5
    assert progress.last_activity_date == date(2024, 3, 1)


# ============================================================================
# Milestone Tests
# ============================================================================

@pytest.mark.parametrize("previous,milestone", [(6, 7), (29, 30)])
def test_update_streak_milestone_reached(progress_on_day, utc, previous, milestone):
    """Test reaching 7 and 30 days flags a milestone"""
    progress = progress_on_day(date(2024, 3, 1), streak=previous)

    update = update_streak(progress, utc(2024, 3, 2, 12))

    assert update.milestone_reached == milestone


@pytest.mark.parametrize("previous", [1, 5, 7, 8, 30])
def test_update_streak_no_milestone(progress_on_day, utc, previous):
    """Test non-milestone transitions carry no milestone"""
    progress = progress_on_day(date(2024, 3, 1), streak=previous)

    update = update_streak(progress, utc(2024, 3, 2, 12))

    assert update.milestone_reached is None


def test_update_streak_milestone_not_repeated_same_day(progress_on_day, utc):
    """Test a second session on the milestone day earns no second milestone"""
    progress = progress_on_day(date(2024, 3, 2), streak=7)

    update = update_streak(progress, utc(2024, 3, 2, 18))

    assert update.milestone_reached is None


# ============================================================================
# Reference Timezone Tests
# ============================================================================

def test_update_streak_uses_reference_timezone(progress_on_day, reference_timezone):
    """Test civil days are taken in the reference timezone, not UTC"""
    reference_timezone("America/New_York")
    progress = progress_on_day(date(2024, 3, 1), streak=2)

    # 03:00 UTC on Mar 2 is 22:00 on Mar 1 in New York
    update = update_streak(progress, datetime(2024, 3, 2, 3, 0, tzinfo=timezone.utc))

    assert update.civil_date == date(2024, 3, 1)
    assert update.relation == DayRelation.SAME_DAY


def test_update_streak_input_offset_irrelevant(progress_on_day, test_timezone):
    """Test the instant matters, not the offset it was reported in"""
    progress = progress_on_day(date(2024, 3, 1), streak=2)

    # 20:00 in New York on Mar 1 is 01:00 UTC on Mar 2
    update = update_streak(progress, datetime(2024, 3, 1, 20, 0, tzinfo=test_timezone))

    assert update.civil_date == date(2024, 3, 2)
    assert update.relation == DayRelation.NEXT_DAY


# ============================================================================
# Apply Streak Tests
# ============================================================================

def test_apply_streak_first_session_of_day(progress_on_day, utc):
    """Test opening a new day resets the day counter"""
    progress = progress_on_day(date(2024, 3, 1), streak=2, sessions_on_last_activity_day=4)

    apply_streak(progress, update_streak(progress, utc(2024, 3, 2, 12)))

    assert progress.current_streak == 3
    assert progress.last_activity_date == date(2024, 3, 2)
    assert progress.sessions_on_last_activity_day == 1
    assert progress.first_session_of_day_count == 1


def test_apply_streak_same_day(progress_on_day, utc):
    """Test another session on the same day bumps the day counter only"""
    progress = progress_on_day(date(2024, 3, 1), streak=2)

    apply_streak(progress, update_streak(progress, utc(2024, 3, 1, 23)))

    assert progress.current_streak == 2
    assert progress.last_activity_date == date(2024, 3, 1)
    assert progress.sessions_on_last_activity_day == 2
    assert progress.first_session_of_day_count == 0


def test_apply_streak_late_event(progress_on_day, utc):
    """Test an event before the last active day leaves that day's counter alone"""
    progress = progress_on_day(date(2024, 3, 5), streak=3, sessions_on_last_activity_day=4)

    apply_streak(progress, update_streak(progress, utc(2024, 3, 4, 20)))

    assert progress.current_streak == 3
    assert progress.last_activity_date == date(2024, 3, 5)
    assert progress.sessions_on_last_activity_day == 4
    assert progress.first_session_of_day_count == 0
