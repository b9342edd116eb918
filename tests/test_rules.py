from conftest import pivots_from
from ewcount.ew.core.rules import (
    is_downward_impulse,
    is_upward_impulse,
    is_valid_correction,
    is_valid_impulse,
)


def test_valid_bullish_impulse():
    assert is_valid_impulse(pivots_from([100, 120, 110, 150, 135, 155]), bullish=True)
    assert is_upward_impulse(pivots_from([100, 120, 110, 150, 135, 155]))


def test_wave4_overlap_rejected():
    assert not is_valid_impulse(pivots_from([100, 120, 110, 150, 119, 160]), bullish=True)
    # touching the wave 1 top is an overlap too
    assert not is_valid_impulse(pivots_from([100, 120, 110, 150, 120, 160]), bullish=True)


def test_wave3_shortest_rejected():
    # w1=20, w3=15, w5=25; every other rule holds
    assert not is_valid_impulse(pivots_from([100, 120, 115, 130, 125, 150]), bullish=True)


def test_wave3_equal_to_shorter_neighbour_is_allowed():
    # w1=20, w3=20, w5=30
    assert is_valid_impulse(pivots_from([100, 120, 110, 130, 125, 155]), bullish=True)


def test_wave2_full_retrace_rejected():
    assert not is_valid_impulse(pivots_from([100, 120, 100, 150, 135, 155]), bullish=True)


def test_direction_must_follow_trend():
    assert not is_valid_impulse(pivots_from([100, 120, 110, 150, 135, 155]), bullish=False)


def test_valid_bearish_impulse():
    sw = pivots_from([200, 180, 190, 150, 165, 145])
    assert is_valid_impulse(sw, bullish=False)
    assert is_downward_impulse(sw)
    assert not is_valid_impulse(pivots_from([200, 180, 190, 150, 181, 145]), bullish=False)


def test_impulse_needs_six_pivots():
    assert not is_valid_impulse(pivots_from([100, 120, 110, 150, 135]), bullish=True)


def test_correction_against_uptrend():
    assert is_valid_correction(pivots_from([150, 130, 140, 120]), main_trend_bullish=True)


def test_correction_b_above_origin_rejected():
    assert not is_valid_correction(pivots_from([150, 130, 155, 120]), main_trend_bullish=True)


def test_correction_against_downtrend():
    assert is_valid_correction(pivots_from([100, 120, 110, 125]), main_trend_bullish=False)
    assert not is_valid_correction(pivots_from([100, 120, 95, 125]), main_trend_bullish=False)


def test_correction_needs_four_pivots():
    assert not is_valid_correction(pivots_from([150, 130, 140]), main_trend_bullish=True)
