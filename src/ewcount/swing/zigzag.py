"""ZigZag / pivot extraction.

Stable API:
- ZigZagConfig(pct=...)
- zigzag_pivots(candles, cfg_or_pct) -> list[Pivot]

`candles` may be a list of Candle, a CandleSeries, a pandas DataFrame with
open/high/low/close[/volume] or a list of dict rows.

The filter is a three-state machine. Until the first pivot is known the
reference price is the first close; afterwards the running extreme is
extended in place while price keeps going, and a new pivot of the opposite
type is committed only once price reverses by more than `pct` percent.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, List

from ewcount.data.bars import as_candle_series
from ewcount.ew.core.model import Pivot, PivotType
from ewcount.logging import get_logger

log = get_logger("ewcount.zigzag")


@dataclass(frozen=True)
class ZigZagConfig:
    pct: float = 5.0


class ZigZagState(Enum):
    UNDETERMINED = 0
    TRACKING_HIGH = 1
    TRACKING_LOW = 2


def _get_pct(cfg_or_pct: Any) -> float:
    if isinstance(cfg_or_pct, (int, float)):
        return float(cfg_or_pct)
    if isinstance(cfg_or_pct, dict) and "pct" in cfg_or_pct:
        return float(cfg_or_pct["pct"])
    if hasattr(cfg_or_pct, "pct"):
        return float(getattr(cfg_or_pct, "pct"))
    return ZigZagConfig().pct


def zigzag_pivots(candles: Any, cfg_or_pct: Any = None) -> List[Pivot]:
    pct = _get_pct(cfg_or_pct) if cfg_or_pct is not None else ZigZagConfig().pct
    if pct <= 0:
        raise ValueError(f"zigzag deviation must be positive, got {pct}")

    series = as_candle_series(candles)
    if not len(series):
        return []

    up = 1.0 + pct / 100.0
    down = 1.0 - pct / 100.0

    pivots: List[Pivot] = []
    state = ZigZagState.UNDETERMINED
    last_px = series[0].close

    for i, c in enumerate(series):
        hi = Pivot(index=i, price=c.high, type=PivotType.HIGH, time=c.time, volume=c.volume)
        lo = Pivot(index=i, price=c.low, type=PivotType.LOW, time=c.time, volume=c.volume)

        if state is ZigZagState.UNDETERMINED:
            if c.high > last_px * up:
                state, last_px = ZigZagState.TRACKING_HIGH, c.high
                pivots.append(hi)
            elif c.low < last_px * down:
                state, last_px = ZigZagState.TRACKING_LOW, c.low
                pivots.append(lo)
        elif state is ZigZagState.TRACKING_HIGH:
            if c.high > last_px:
                last_px = c.high
                pivots[-1] = hi
            elif c.low < last_px * down:
                state, last_px = ZigZagState.TRACKING_LOW, c.low
                pivots.append(lo)
        else:
            if c.low < last_px:
                last_px = c.low
                pivots[-1] = lo
            elif c.high > last_px * up:
                state, last_px = ZigZagState.TRACKING_HIGH, c.high
                pivots.append(hi)

    log.debug("zigzag done", extra={"pct": pct, "candles": len(series), "pivots": len(pivots)})
    return pivots
