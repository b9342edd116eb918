"""WaveOptions / tuning knobs.

Options stay small and explicit. `from_config` reads the `ew` section of a
loaded config dict:

    {"ew": {"degrees": {"subminuette": 1, "minuette": 2, "minute": 3, "minor": 5},
            "weights": {...}, "score": {...}, "projection": {...},
            "bar_seconds": 3600}}
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from ewcount.ew.core.model import Degree
from ewcount.ew.core.projection import ProjectionConfig
from ewcount.ew.core.scorer import ChainWeights, ScoreConfig

T = TypeVar("T")

DEFAULT_DEGREES: Tuple[Tuple[float, Degree], ...] = (
    (1.0, Degree.SUBMINUETTE),
    (2.0, Degree.MINUETTE),
    (3.0, Degree.MINUTE),
    (5.0, Degree.MINOR),
)


@dataclass(frozen=True)
class WaveOptions:
    degrees: Tuple[Tuple[float, Degree], ...] = DEFAULT_DEGREES
    weights: ChainWeights = field(default_factory=ChainWeights)
    score: ScoreConfig = field(default_factory=ScoreConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    bar_seconds: Optional[int] = None  # None: infer from candle spacing

    @staticmethod
    def from_config(cfg: Mapping[str, Any]) -> "WaveOptions":
        sec = cfg.get("ew") or {}
        degrees = DEFAULT_DEGREES
        if sec.get("degrees"):
            degrees = tuple(
                sorted(((float(pct), Degree(str(name).lower())) for name, pct in sec["degrees"].items()),
                       key=lambda x: x[0])
            )
        bar_seconds = sec.get("bar_seconds")
        return WaveOptions(
            degrees=degrees,
            weights=_section(ChainWeights, sec.get("weights")),
            score=_section(ScoreConfig, sec.get("score")),
            projection=_section(ProjectionConfig, sec.get("projection")),
            bar_seconds=int(bar_seconds) if bar_seconds else None,
        )


def _section(cls: Type[T], data: Optional[Mapping[str, Any]]) -> T:
    """Build a frozen config dataclass from a dict, ignoring unknown keys."""
    if not data:
        return cls()
    known = {f.name: f for f in fields(cls)}  # type: ignore[arg-type]
    kw: Dict[str, Any] = {}
    for k, v in data.items():
        if k not in known:
            continue
        if isinstance(v, list):
            v = tuple(v)
        kw[k] = v
    return cls(**kw)
