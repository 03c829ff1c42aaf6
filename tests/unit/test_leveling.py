"""Unit tests for the leveling curve (progress_engine/gamification/leveling.py)"""
import pytest

from progress_engine.gamification.leveling import (
    MAX_LEVEL,
    calculate_level,
    get_level_info,
    level_progress,
    xp_for_level,
    xp_to_next_level,
)


# ============================================================================
# Threshold Tests
# ============================================================================

@pytest.mark.parametrize("level,expected_xp", [
    (1, 0),
    (2, 282),
    (3, 519),
    (4, 800),
    (5, 1118),
    (10, 3162),
    (50, 35355),
    (100, 100000),
])
def test_xp_for_level_known_values(level, expected_xp):
    """Test cumulative thresholds follow floor(100 * L^1.5)"""
    assert xp_for_level(level) == expected_xp


def test_xp_for_level_strictly_increasing():
    """Test thresholds increase with every level"""
    thresholds = [xp_for_level(level) for level in range(1, MAX_LEVEL + 1)]
    assert thresholds == sorted(set(thresholds))


def test_xp_for_level_perfect_squares_exact():
    """Test levels whose threshold is an exact integer are not rounded down"""
    # 4^1.5 = 8, 9^1.5 = 27, 16^1.5 = 64
    assert xp_for_level(4) == 800
    assert xp_for_level(9) == 2700
    assert xp_for_level(16) == 6400


# ============================================================================
# Level Calculation Tests
# ============================================================================

def test_calculate_level_zero_xp():
    """Test 0 XP is level 1"""
    assert calculate_level(0) == 1


def test_calculate_level_low_xp_floor():
    """Test anything below the level-2 threshold is level 1"""
    assert calculate_level(1) == 1
    assert calculate_level(150) == 1
    assert calculate_level(281) == 1


def test_calculate_level_at_boundaries():
    """Test the exact threshold reaches the level, one XP less does not"""
    for level in range(2, MAX_LEVEL + 1):
        threshold = xp_for_level(level)
        assert calculate_level(threshold) == level
        assert calculate_level(threshold - 1) == level - 1


def test_calculate_level_round_trip():
    """Test calculate_level inverts xp_for_level across the whole range"""
    for level in range(1, MAX_LEVEL + 1):
        assert calculate_level(xp_for_level(level)) == level


def test_calculate_level_clamped_at_max():
    """Test XP beyond the level-100 threshold stays at level 100"""
    assert calculate_level(100000) == 100
    assert calculate_level(10 ** 9) == 100


def test_calculate_level_monotonic():
    """Test level never decreases as XP grows"""
    previous = 1
    for xp in range(0, 5000, 7):
        level = calculate_level(xp)
        assert level >= previous
        previous = level


# ============================================================================
# Level Progress Tests
# ============================================================================

def test_xp_to_next_level():
    """Test XP remaining until the next threshold"""
    assert xp_to_next_level(0) == 282
    assert xp_to_next_level(282) == 519 - 282
    assert xp_to_next_level(700) == 100


def test_xp_to_next_level_at_cap():
    """Test no further XP is needed at the level cap"""
    assert xp_to_next_level(100000) == 0
    assert xp_to_next_level(250000) == 0


def test_level_progress_bounds():
    """Test progress is a percentage within [0, 100]"""
    assert level_progress(0) == 0.0
    assert level_progress(282) == 0.0
    assert level_progress(100000) == 100.0
    for xp in (1, 141, 400, 799, 5000, 99999):
        assert 0.0 <= level_progress(xp) <= 100.0


def test_level_progress_halfway():
    """Test halfway between level 1 and level 2"""
    assert level_progress(141) == pytest.approx(50.0, abs=0.5)


def test_get_level_info():
    """Test level summary for a mid-level total"""
    info = get_level_info(700)

    assert info["current_level"] == 3
    assert info["xp_in_current_level"] == 700 - 519
    assert info["xp_to_next_level"] == 100
    assert info["total_xp_for_next_level"] == 800
    assert 0 < info["progress_percent"] < 100


def test_get_level_info_max_level():
    """Test level summary at the cap"""
    info = get_level_info(120000)

    assert info["current_level"] == 100
    assert info["xp_to_next_level"] == 0
    assert info["progress_percent"] == 100.0
