"""EW analyzer: multi-degree search + projection.

- Extract pivots at every deviation of the degree table (1/2/3/5 % by default).
- Build a greedy chain per degree.
- Keep the chain with the strictly highest score (ties keep the first degree).
- Append one projected point for the next expected wave.

Each degree run is independent; the winner is picked by a plain reduction
over the per-degree results.
"""

from __future__ import annotations

from functools import reduce
from typing import Any, List, Optional

from ewcount.data.bars import CandleSeries, as_candle_series
from ewcount.ew.core.model import Chain, WavePoint
from ewcount.ew.core.options import WaveOptions
from ewcount.ew.core.projection import project_next
from ewcount.ew.detectors.chain import build_chain
from ewcount.logging import get_logger
from ewcount.swing.zigzag import zigzag_pivots

log = get_logger("ewcount.analyzer")


def _pick(best: Optional[Chain], cand: Optional[Chain]) -> Optional[Chain]:
    if cand is None:
        return best
    if best is None or cand.score > best.score:
        return cand
    return best


def degree_chains(series: CandleSeries, start_index: int, options: WaveOptions) -> List[Optional[Chain]]:
    out: List[Optional[Chain]] = []
    for pct, degree in options.degrees:
        pivots = zigzag_pivots(series, pct)
        chain = build_chain(pivots, start_index, degree, options)
        log.debug(
            "degree scored",
            extra={
                "degree": degree.value,
                "pct": pct,
                "pivots": len(pivots),
                "score": chain.score if chain is not None else None,
            },
        )
        out.append(chain)
    return out


def analyze_chain(candles: Any, start_index: int = 0, options: Optional[WaveOptions] = None) -> Optional[Chain]:
    """Best chain across all degrees, or None when no degree yields a count."""
    opts = options or WaveOptions()
    series = as_candle_series(candles)
    if not len(series):
        return None
    return reduce(_pick, degree_chains(series, start_index, opts), None)


def analyze(candles: Any, start_index: int = 0, options: Optional[WaveOptions] = None) -> List[WavePoint]:
    """Labeled wave points for a candle series, with one trailing projection.

    An empty list means no interpretable wave count at any degree.
    """
    opts = options or WaveOptions()
    series = as_candle_series(candles)
    best = analyze_chain(series, start_index, opts)
    if best is None:
        log.debug("no wave count", extra={"candles": len(series)})
        return []

    points = list(best.points)
    bar_seconds = opts.bar_seconds or series.nominal_bar_seconds()
    proj = project_next(best, bar_seconds, opts.projection)
    if proj is not None:
        points.append(proj)

    log.info(
        "wave count: degree=%s score=%.2f points=%d projection=%s",
        best.degree.value,
        best.score,
        len(best.points),
        proj.label if proj is not None else "-",
    )
    return points
