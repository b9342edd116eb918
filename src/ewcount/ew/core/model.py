"""Canonical EW core models.

Pivots are produced by the zigzag filter; WavePoints are the labeled result
handed to chart overlays. A Chain is the transient parse of one degree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PivotType(str, Enum):
    HIGH = "high"
    LOW = "low"

    @property
    def opposite(self) -> "PivotType":
        return PivotType.LOW if self is PivotType.HIGH else PivotType.HIGH


class Degree(str, Enum):
    SUBMINUETTE = "subminuette"
    MINUETTE = "minuette"
    MINUTE = "minute"
    MINOR = "minor"


@dataclass(frozen=True)
class Pivot:
    """A confirmed local extreme surviving the zigzag filter."""
    index: int
    price: float
    type: PivotType
    time: int
    volume: float = 0.0


class SegmentKind(str, Enum):
    IMPULSE = "impulse"
    CORRECTION = "correction"
    PARTIAL = "partial"


START_LABEL = "Start"
CORRECTION_LABELS = ("A", "B", "C")
PROJECTION_SUFFIX = " (Proj)"


@dataclass(frozen=True)
class WavePoint:
    time: int
    price: float
    label: str
    wave_level: int
    type: Optional[PivotType] = None
    degree: Optional[Degree] = None
    is_projection: bool = False
    description: Optional[str] = None

    @staticmethod
    def from_pivot(p: Pivot, label: str, wave_level: int, degree: Optional[Degree]) -> "WavePoint":
        return WavePoint(time=p.time, price=p.price, label=label, wave_level=wave_level, type=p.type, degree=degree)

    def to_dict(self) -> Dict[str, Any]:
        """Overlay shape; keys match the external `{"waves": [...]}` entries."""
        out: Dict[str, Any] = {
            "time": self.time,
            "price": self.price,
            "label": self.label,
            "waveLevel": self.wave_level,
            "isProjection": self.is_projection,
            "type": self.type.value if self.type is not None else None,
            "degree": self.degree.value if self.degree is not None else None,
        }
        if self.description is not None:
            out["description"] = self.description
        return out


@dataclass(frozen=True)
class ChainSegment:
    """One accepted sub-pattern: origin pivot plus the wave-end pivots it consumed."""
    kind: SegmentKind
    origin: Pivot
    waves: List[Pivot]
    score: float

    @property
    def bullish(self) -> bool:
        return bool(self.waves) and self.waves[0].price > self.origin.price

    def price(self, wave: int) -> float:
        """Price at the end of `wave` (0 = origin)."""
        if wave == 0:
            return self.origin.price
        return self.waves[wave - 1].price


@dataclass
class Chain:
    degree: Degree
    points: List[WavePoint] = field(default_factory=list)
    segments: List[ChainSegment] = field(default_factory=list)
    score: float = 0.0

    @property
    def last(self) -> Optional[WavePoint]:
        return self.points[-1] if self.points else None

    @property
    def last_segment(self) -> Optional[ChainSegment]:
        return self.segments[-1] if self.segments else None
