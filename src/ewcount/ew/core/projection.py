"""Next-wave projection.

Targets come from Fibonacci relationships with the waves already counted in
the last segment of the chain. Wave 4 and wave 5 targets are clamped so the
projected wave cannot break the impulse rules on its own:

- wave 4 never reaches wave 1 territory
- wave 5 is shortened when wave 3 is shorter than wave 1, so wave 3 does not
  end up the shortest wave
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ewcount.ew.core.model import (
    PROJECTION_SUFFIX,
    Chain,
    ChainSegment,
    PivotType,
    WavePoint,
)
from ewcount.logging import get_logger

log = get_logger("ewcount.projection")


@dataclass(frozen=True)
class ProjectionConfig:
    w2_retrace: float = 0.618
    w3_extension: float = 1.618
    w4_retrace: float = 0.382
    w5_short: float = 0.618      # of wave 3, when wave 3 < wave 1
    new_cycle_pct: float = 0.10
    overlap_margin: float = 0.001
    bars_ahead: int = 5


def _target_for(seg: ChainSegment, wave: int, cfg: ProjectionConfig) -> float:
    """Target for the wave following `wave` inside an impulse segment."""
    p = seg.price
    if wave == 1:
        return p(1) - cfg.w2_retrace * (p(1) - p(0))
    if wave == 2:
        return p(2) + cfg.w3_extension * (p(1) - p(0))
    if wave == 3:
        target = p(3) - cfg.w4_retrace * (p(3) - p(2))
        if seg.bullish and target <= p(1):
            target = p(1) * (1.0 + cfg.overlap_margin)
        elif not seg.bullish and target >= p(1):
            target = p(1) * (1.0 - cfg.overlap_margin)
        return target
    # wave == 4
    w1 = abs(p(1) - p(0))
    w3 = abs(p(3) - p(2))
    length = w1 if w3 >= w1 else cfg.w5_short * w3
    return p(4) + length if seg.bullish else p(4) - length


def project_next(chain: Chain, bar_seconds: int, cfg: ProjectionConfig = ProjectionConfig()) -> Optional[WavePoint]:
    last = chain.last
    seg = chain.last_segment
    if last is None or seg is None or len(chain.points) < 2:
        return None

    bullish_next = last.type is PivotType.LOW
    label = last.label

    if label in ("1", "2", "3", "4"):
        wave = int(label)
        target = _target_for(seg, wave, cfg)
        next_label = str(wave + 1)
    elif label in ("5", "C"):
        target = last.price * (1.0 + cfg.new_cycle_pct if bullish_next else 1.0 - cfg.new_cycle_pct)
        next_label = "1"
    else:
        return None

    proj = WavePoint(
        time=int(last.time) + int(cfg.bars_ahead) * int(bar_seconds),
        price=float(target),
        label=next_label + PROJECTION_SUFFIX,
        wave_level=0,
        type=PivotType.HIGH if bullish_next else PivotType.LOW,
        degree=last.degree,
        is_projection=True,
    )
    log.debug("projection", extra={"from_label": label, "label": proj.label, "target": proj.price})
    return proj
