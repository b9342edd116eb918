"""Greedy chain builder.

Walks the pivot list from the anchor nearest `start_index` and, at every
position, takes the first sub-pattern that fits:

1. full impulse (6 pivots)
2. full A-B-C correction (4 pivots)
3. partial impulse, only at the tail or when it covers at least 3 waves
4. otherwise skip one pivot and pay the desync penalty

This is a greedy, non-backtracking parse and therefore an approximation: an
accepted sub-pattern is never revisited even when a different split would
have scored higher later on.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from ewcount.ew.core.model import (
    CORRECTION_LABELS,
    START_LABEL,
    Chain,
    ChainSegment,
    Degree,
    Pivot,
    SegmentKind,
    WavePoint,
)
from ewcount.ew.core.options import WaveOptions
from ewcount.ew.core.partial import partial_impulse_length
from ewcount.ew.core.rules import is_valid_correction, is_valid_impulse
from ewcount.ew.core.scorer import score_impulse
from ewcount.logging import get_logger

log = get_logger("ewcount.chain")


def nearest_pivot(pivots: Sequence[Pivot], start_index: int) -> int:
    """Position of the pivot whose bar index is closest to `start_index` (first wins ties)."""
    best = -1
    best_dist = None
    for i, p in enumerate(pivots):
        d = abs(p.index - start_index)
        if best_dist is None or d < best_dist:
            best, best_dist = i, d
    return best


def _append(chain: Chain, kind: SegmentKind, window: Sequence[Pivot], labels: Sequence[str], score: float) -> None:
    waves = list(window[1:len(labels) + 1])
    for level, (p, label) in enumerate(zip(waves, labels), start=1):
        chain.points.append(WavePoint.from_pivot(p, label, level, chain.degree))
    chain.segments.append(ChainSegment(kind=kind, origin=window[0], waves=waves, score=score))
    chain.score += score


def build_chain(
    pivots: Sequence[Pivot],
    start_index: int,
    degree: Degree,
    options: WaveOptions = WaveOptions(),
) -> Optional[Chain]:
    anchor = nearest_pivot(pivots, start_index)
    if anchor < 0 or anchor >= len(pivots) - 1:
        log.debug("chain skipped", extra={"degree": degree.value, "pivots": len(pivots), "anchor": anchor})
        return None

    w = options.weights
    n = len(pivots)
    chain = Chain(degree=degree)
    chain.points.append(WavePoint.from_pivot(pivots[anchor], START_LABEL, 0, degree))

    pos = anchor
    skips = 0
    while pos < n - 1:
        rest: List[Pivot] = list(pivots[pos:])
        bullish = rest[1].price > rest[0].price

        if len(rest) >= 6 and is_valid_impulse(rest[:6], bullish):
            sc = w.impulse_base + score_impulse(rest[:6], options.score)
            _append(chain, SegmentKind.IMPULSE, rest[:6], ["1", "2", "3", "4", "5"], sc)
            pos += 5
            continue

        # A moving down from p0 means the correction runs against an uptrend
        if len(rest) >= 4 and is_valid_correction(rest[:4], main_trend_bullish=not bullish):
            _append(chain, SegmentKind.CORRECTION, rest[:4], CORRECTION_LABELS, w.correction)
            pos += 3
            continue

        k = partial_impulse_length(rest, bullish)
        if k > 0:
            at_tail = pos + k + 1 >= n
            if at_tail or k >= w.partial_min_waves:
                _append(chain, SegmentKind.PARTIAL, rest[:k + 1], [str(i) for i in range(1, k + 1)],
                        w.partial_per_wave * k)
                pos += k
                continue

        pos += 1
        skips += 1
        chain.score -= w.skip_penalty

    log.debug(
        "chain built",
        extra={
            "degree": degree.value,
            "score": chain.score,
            "segments": [s.kind.value for s in chain.segments],
            "skips": skips,
        },
    )
    return chain
