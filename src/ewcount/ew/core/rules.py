from __future__ import annotations

from typing import Sequence

from ewcount.ew.core.model import Pivot


def _prices(sw: Sequence[Pivot]):
    return [float(s.price) for s in sw]


def is_valid_impulse(sw: Sequence[Pivot], bullish: bool) -> bool:
    """Hard impulse rules over p0..p5 (p0 = start, p1..p5 = ends of waves 1-5).

    - Wave 2 does not retrace past the start of wave 1
    - Wave 3 is never the shortest of waves 1, 3 and 5
    - Wave 4 does not overlap wave 1 price territory
    - Waves 1, 3 and 5 move with the trend

    Bearish impulses are the mirror image.
    """
    if len(sw) != 6:
        return False
    p0, p1, p2, p3, p4, p5 = _prices(sw)

    if bullish:
        if p2 <= p0:
            return False
    else:
        if p2 >= p0:
            return False

    w1 = abs(p1 - p0)
    w3 = abs(p3 - p2)
    w5 = abs(p5 - p4)
    if w3 < w1 and w3 < w5:
        return False

    if bullish:
        if p4 <= p1:
            return False
        if not (p1 > p0 and p3 > p2 and p5 > p4):
            return False
    else:
        if p4 >= p1:
            return False
        if not (p1 < p0 and p3 < p2 and p5 < p4):
            return False

    return True


def is_upward_impulse(sw: Sequence[Pivot]) -> bool:
    return is_valid_impulse(sw, bullish=True)


def is_downward_impulse(sw: Sequence[Pivot]) -> bool:
    return is_valid_impulse(sw, bullish=False)


def is_valid_correction(sw: Sequence[Pivot], main_trend_bullish: bool) -> bool:
    """Zigzag A-B-C over p0, pA, pB, pC.

    Against an uptrend A falls from p0, B bounces but stays below p0 (no
    expanded flats) and C falls from B. Against a downtrend everything flips.
    """
    if len(sw) != 4:
        return False
    p0, pa, pb, pc = _prices(sw)

    if main_trend_bullish:
        return pa < p0 and pa < pb < p0 and pc < pb
    return pa > p0 and pa > pb > p0 and pc > pb
