"""Scoring for Elliott patterns.

Impulse guidelines (not rules) are worth one or two points each; they only
rank competing interpretations that already passed the hard rules.
ChainWeights turn accepted sub-patterns into the running chain score.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ewcount.ew.core.model import Pivot


@dataclass(frozen=True)
class ScoreConfig:
    extended_w3_bonus: float = 2.0
    w5_equality: Tuple[float, float] = (0.9, 1.1)    # w5 / w1
    w5_golden: Tuple[float, float] = (0.55, 0.70)    # w5 / w1
    alternation_ratio: float = 1.5                   # wave 2 vs wave 4 duration
    w3_extension: float = 1.618                      # w3 / w1
    w3_tolerance: float = 0.10


@dataclass(frozen=True)
class ChainWeights:
    impulse_base: float = 10.0
    correction: float = 5.0
    partial_per_wave: float = 2.0
    skip_penalty: float = 2.0
    partial_min_waves: int = 3


def _ratio(num: float, den: float) -> Optional[float]:
    if den <= 0:
        return None
    return num / den


def _inside(x: Optional[float], band: Tuple[float, float]) -> bool:
    return x is not None and band[0] < x < band[1]


def score_impulse(sw: Sequence[Pivot], cfg: ScoreConfig = ScoreConfig()) -> float:
    if len(sw) != 6:
        return 0.0
    p0, p1, p2, p3, p4, p5 = [float(s.price) for s in sw]
    w1 = abs(p1 - p0)
    w3 = abs(p3 - p2)
    w5 = abs(p5 - p4)

    s = 0.0
    if w3 > w1 and w3 > w5:
        s += cfg.extended_w3_bonus
        r5 = _ratio(w5, w1)
        if _inside(r5, cfg.w5_equality):
            s += 1.0
        if _inside(r5, cfg.w5_golden):
            s += 1.0

    # time alternation between the two corrective waves
    d2 = abs(sw[2].index - sw[1].index)
    d4 = abs(sw[4].index - sw[3].index)
    if d2 > d4 * cfg.alternation_ratio or d4 > d2 * cfg.alternation_ratio:
        s += 1.0

    # volume at the pivot stands in for the wave's peak volume
    if float(sw[3].volume or 0.0) > float(sw[5].volume or 0.0):
        s += 1.0

    r3 = _ratio(w3, w1 * cfg.w3_extension)
    if _inside(r3, (1.0 - cfg.w3_tolerance, 1.0 + cfg.w3_tolerance)):
        s += 1.0

    return float(s)
