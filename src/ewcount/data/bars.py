"""Candle models (stable surface).

The wave engine works on plain `Candle` records; `CandleSeries` adds a
pandas view and a few conversions used by the CLI and the overlay helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

import pandas as pd

DEFAULT_BAR_SECONDS = 86_400


@dataclass(frozen=True)
class Candle:
    time: int  # seconds since epoch (UTC)
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    @staticmethod
    def from_mapping(row: Dict[str, Any]) -> "Candle":
        return Candle(
            time=int(row["time"]),
            open=float(row["open"]),
            high=float(row["high"]),
            low=float(row["low"]),
            close=float(row["close"]),
            volume=float(row.get("volume") or 0.0),
        )


def _time_column_to_seconds(values: Any) -> List[int]:
    s = pd.Series(values)
    if pd.api.types.is_numeric_dtype(s):
        return [int(v) for v in s.tolist()]
    ts = pd.to_datetime(s, utc=True)
    return [int(t.timestamp()) for t in ts]


class CandleSeries:
    def __init__(self, candles: List[Candle]):
        self.candles: List[Candle] = candles
        self._df: Optional[pd.DataFrame] = None

    @staticmethod
    def from_df(df: pd.DataFrame) -> "CandleSeries":
        """Build from a DataFrame with open/high/low/close[/volume].

        Times come from a `time` column (epoch seconds or datetime strings) or,
        failing that, from a DatetimeIndex.
        """
        req = {"open", "high", "low", "close"}
        missing = req - set(df.columns)
        if missing:
            raise ValueError(f"candle frame missing columns: {sorted(missing)}")
        if "time" in df.columns:
            times = _time_column_to_seconds(df["time"])
        elif isinstance(df.index, pd.DatetimeIndex):
            times = _time_column_to_seconds(df.index)
        else:
            raise TypeError("candle frame needs a 'time' column or a DatetimeIndex")

        vols = df["volume"].fillna(0.0).tolist() if "volume" in df.columns else [0.0] * len(df)
        candles = [
            Candle(time=t, open=float(o), high=float(hi), low=float(lo), close=float(c), volume=float(v))
            for t, o, hi, lo, c, v in zip(
                times,
                df["open"].tolist(),
                df["high"].tolist(),
                df["low"].tolist(),
                df["close"].tolist(),
                vols,
            )
        ]
        return CandleSeries(candles)

    def __len__(self) -> int:
        return len(self.candles)

    def __iter__(self) -> Iterator[Candle]:
        return iter(self.candles)

    def __getitem__(self, i: int) -> Candle:
        return self.candles[i]

    @property
    def df(self) -> pd.DataFrame:
        if self._df is None:
            idx = pd.to_datetime([c.time for c in self.candles], unit="s", utc=True)
            self._df = pd.DataFrame(
                {
                    "time": [c.time for c in self.candles],
                    "open": [c.open for c in self.candles],
                    "high": [c.high for c in self.candles],
                    "low": [c.low for c in self.candles],
                    "close": [c.close for c in self.candles],
                    "volume": [c.volume for c in self.candles],
                },
                index=idx,
            )
        return self._df

    def to_df(self) -> pd.DataFrame:
        return self.df.copy()

    def times(self) -> List[int]:
        return [c.time for c in self.candles]

    def nominal_bar_seconds(self, default: int = DEFAULT_BAR_SECONDS) -> int:
        """Median spacing between consecutive candles."""
        if len(self.candles) < 2:
            return default
        step = pd.Series(self.times()).diff().dropna().median()
        if pd.isna(step) or step <= 0:
            return default
        return int(step)


def as_candle_series(obj: Any) -> CandleSeries:
    """Best-effort conversion of frames, lists of candles or dict rows."""
    if isinstance(obj, CandleSeries):
        return obj
    if isinstance(obj, pd.DataFrame):
        return CandleSeries.from_df(obj)
    rows = list(obj or [])
    out: List[Candle] = []
    for r in rows:
        if isinstance(r, Candle):
            out.append(r)
        elif isinstance(r, dict):
            out.append(Candle.from_mapping(r))
        else:
            raise TypeError(f"Unsupported candle row type: {type(r)}")
    return CandleSeries(out)
