import math

import pytest

from conftest import pivots_from
from ewcount.ew.core.scorer import ScoreConfig, score_impulse


def test_score_extended_wave3_with_equality_and_volume():
    sw = pivots_from(
        [100, 120, 110, 150, 135, 155],
        indices=[2, 6, 8, 14, 17, 21],
        volumes=[0, 0, 0, 1000, 0, 500],
    )
    # +2 extended w3, +1 w5 == w1, +1 volume decay; durations 2 vs 3 are not alternation
    assert score_impulse(sw) == pytest.approx(4.0)


def test_score_golden_wave5():
    assert score_impulse(pivots_from([100, 120, 110, 150, 140, 152])) == pytest.approx(3.0)


def test_score_wave3_extension_ratio():
    # w1=10, w3=16 (~1.618), w5=6.5 (0.65 of w1)
    assert score_impulse(pivots_from([100, 110, 105, 121, 118, 124.5])) == pytest.approx(4.0)


def test_score_time_alternation():
    sw = pivots_from([100, 120, 110, 150, 135, 140], indices=[0, 2, 4, 6, 12, 14])
    # +2 extended w3, +1 alternation (2 vs 6 bars); w5/w1 = 0.25 gives nothing
    assert score_impulse(sw) == pytest.approx(3.0)


def test_score_zero_length_wave1_is_finite():
    s = score_impulse(pivots_from([100, 100, 95, 120, 110, 115]))
    assert math.isfinite(s)
    assert s == pytest.approx(2.0)


def test_score_wrong_length():
    assert score_impulse(pivots_from([100, 120, 110])) == 0.0


def test_score_config_override():
    cfg = ScoreConfig(extended_w3_bonus=5.0)
    assert score_impulse(pivots_from([100, 120, 110, 150, 140, 152]), cfg) == pytest.approx(6.0)
