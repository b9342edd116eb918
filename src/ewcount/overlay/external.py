"""Externally sourced wave lists (AI-assisted analysis).

An assistant reply may carry a fenced JSON block:

    ```json
    {"waves": [{"label": "1", "time": "2024-03-01", "price": 123.4, "description": "..."}]}
    ```

These helpers pull that block out of the reply text, snap each wave to the
nearest real candle time and return WavePoints, so engine output and
assistant output share one shape and can be merged or swapped by the caller.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ewcount.data.bars import as_candle_series
from ewcount.ew.core.model import CORRECTION_LABELS, PivotType, WavePoint
from ewcount.logging import get_logger

log = get_logger("ewcount.external")

_WAVE_BLOCK = re.compile(r"```(?:json)?\s*(\{[\s\S]*?\"waves\"[\s\S]*?\})\s*```", re.IGNORECASE)

# epoch values above this are treated as milliseconds
_MS_THRESHOLD = 100_000_000_000
# 8-digit strings are YYYYMMDD when they form a valid date
_COMPACT_DATE = re.compile(r"\d{8}")


def extract_wave_block(text: str) -> List[Dict[str, Any]]:
    """The `waves` list from the first fenced JSON block, or [] when absent/malformed."""
    m = _WAVE_BLOCK.search(text or "")
    if m is None:
        log.warning("no wave block in reply", extra={"snippet": (text or "")[:200]})
        return []
    try:
        data = json.loads(m.group(1))
    except json.JSONDecodeError as e:
        log.warning("wave block is not valid JSON: %s", e)
        return []
    waves = data.get("waves") if isinstance(data, dict) else None
    if not isinstance(waves, list):
        log.warning("wave block has no 'waves' array")
        return []
    return [w for w in waves if isinstance(w, dict)]


def parse_wave_time(value: Any) -> Optional[int]:
    """Epoch seconds from a date string or an epoch number (s or ms)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        s = value.strip()
        if _COMPACT_DATE.fullmatch(s):
            ts = pd.to_datetime(s, format="%Y%m%d", utc=True, errors="coerce")
            if not pd.isna(ts):
                return int(ts.timestamp())
        try:
            value = float(s)
        except ValueError:
            ts = pd.to_datetime(s, utc=True, errors="coerce")
            if pd.isna(ts):
                return None
            return int(ts.timestamp())
    if isinstance(value, (int, float)):
        v = float(value)
        if v != v:
            return None
        if abs(v) > _MS_THRESHOLD:
            v /= 1000.0
        return int(v)
    return None


def wave_level_for(label: str) -> int:
    s = (label or "").strip().upper()
    if s[:1].isdigit():
        return int(s[0])
    if s[:1] in CORRECTION_LABELS:
        return CORRECTION_LABELS.index(s[0]) + 1
    return 0


def _infer_types(points: List[WavePoint]) -> List[WavePoint]:
    out: List[WavePoint] = []
    for i, p in enumerate(points):
        ref = points[i - 1] if i > 0 else (points[i + 1] if i + 1 < len(points) else None)
        kind = None
        if ref is not None:
            kind = PivotType.HIGH if p.price > ref.price else PivotType.LOW
        out.append(
            WavePoint(
                time=p.time,
                price=p.price,
                label=p.label,
                wave_level=p.wave_level,
                type=kind,
                description=p.description,
            )
        )
    return out


def snap_to_candles(waves: Sequence[Dict[str, Any]], candles: Any) -> List[WavePoint]:
    """Snap external waves onto candle times; entries without a usable time/price are dropped."""
    times = as_candle_series(candles).times()
    if not times:
        return []

    snapped: List[WavePoint] = []
    for w in waves:
        t = parse_wave_time(w.get("time"))
        try:
            price = float(w.get("price"))
        except (TypeError, ValueError):
            price = None
        if t is None or price is None:
            log.warning("dropping external wave", extra={"wave": w})
            continue
        nearest = min(range(len(times)), key=lambda i: abs(times[i] - t))
        label = str(w.get("label", ""))
        snapped.append(
            WavePoint(
                time=times[nearest],
                price=price,
                label=label,
                wave_level=wave_level_for(label),
                description=w.get("description"),
            )
        )
        log.debug("snapped wave", extra={"label": label, "target": t, "snapped": times[nearest]})

    snapped.sort(key=lambda p: p.time)
    return _infer_types(snapped)


def waves_payload(points: Sequence[WavePoint]) -> Dict[str, Any]:
    return {"waves": [p.to_dict() for p in points]}
