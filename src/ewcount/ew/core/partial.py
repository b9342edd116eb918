"""Partial impulse matching for the tail of a pivot series.

When fewer than six pivots are left the full impulse check cannot run; this
walks the same rules wave by wave and reports how far the count got.
"""

from __future__ import annotations

from typing import Sequence

from ewcount.ew.core.model import Pivot


def _moves_with(a: float, b: float, bullish: bool) -> bool:
    return b > a if bullish else b < a


def partial_impulse_length(sw: Sequence[Pivot], bullish: bool) -> int:
    """Number of confirmed waves (0..4) of an in-progress impulse.

    A wave 2 that retraces past the start of wave 1, or a wave 4 that
    overlaps wave 1, invalidates the whole candidate (0).
    """
    n = len(sw)
    if n < 2:
        return 0
    p0 = float(sw[0].price)
    p1 = float(sw[1].price)
    if not _moves_with(p0, p1, bullish):
        return 0
    if n < 3:
        return 1

    p2 = float(sw[2].price)
    if not _moves_with(p0, p2, bullish):
        return 0
    if n < 4:
        return 2

    p3 = float(sw[3].price)
    if not _moves_with(p2, p3, bullish):
        return 2
    if n < 5:
        return 3

    p4 = float(sw[4].price)
    if not _moves_with(p1, p4, bullish):
        return 0
    return 4
