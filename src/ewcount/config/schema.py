"""Known config keys and how string values (env vars) are read.

    {"ew": {"degrees": {<degree name>: <pct>, ...},
            "weights": ChainWeights fields,
            "score": ScoreConfig fields,
            "projection": ProjectionConfig fields,
            "bar_seconds": int},
     "log": {"level", "json", "to_file", "utc"}}

Leaf types come from the defaults of the option dataclasses, so a new knob on
ScoreConfig is configurable without touching this module.
"""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Any, Callable, Dict, Mapping, Sequence, Tuple

from ewcount.ew.core.model import Degree
from ewcount.ew.core.projection import ProjectionConfig
from ewcount.ew.core.scorer import ChainWeights, ScoreConfig

Reader = Callable[[str], Any]

_OPTION_SECTIONS = {
    "weights": ChainWeights,
    "score": ScoreConfig,
    "projection": ProjectionConfig,
}
DEGREE_NAMES = frozenset(d.value for d in Degree)


class ConfigError(ValueError):
    """Unknown key, unreadable value or unreadable config file."""


def _read_bool(s: str) -> bool:
    v = s.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"not a boolean: {s!r}")


def _read_pair(s: str) -> Tuple[float, float]:
    # "0.9,1.1" or a JSON list
    raw = json.loads(s) if s.strip().startswith("[") else s.split(",")
    pair = tuple(float(x) for x in raw)
    if len(pair) != 2:
        raise ValueError(f"expected two numbers, got {s!r}")
    return pair  # type: ignore[return-value]


def _reader_for_default(default: Any) -> Reader:
    if isinstance(default, bool):
        return _read_bool
    if isinstance(default, int):
        return int
    if isinstance(default, tuple):
        return _read_pair
    return float


def _option_readers(cls: type) -> Dict[str, Reader]:
    return {f.name: _reader_for_default(f.default) for f in fields(cls)}


_LOG_READERS: Dict[str, Reader] = {
    "level": str,
    "json": _read_bool,
    "to_file": str,
    "utc": _read_bool,
}
_SECTION_READERS = {name: _option_readers(cls) for name, cls in _OPTION_SECTIONS.items()}


def reader_for(path: Sequence[str]) -> Reader:
    """Reader for one leaf, e.g. ("ew", "projection", "bars_ahead") -> int."""
    dotted = ".".join(path)
    head, rest = (path[0], tuple(path[1:])) if path else ("", ())
    if head == "log" and len(rest) == 1 and rest[0] in _LOG_READERS:
        return _LOG_READERS[rest[0]]
    if head == "ew":
        if rest == ("bar_seconds",):
            return int
        if len(rest) == 2 and rest[0] == "degrees" and rest[1] in DEGREE_NAMES:
            return float
        if len(rest) == 2 and rest[1] in _SECTION_READERS.get(rest[0], {}):
            return _SECTION_READERS[rest[0]][rest[1]]
    raise ConfigError(f"unknown config key: {dotted}")


def read_value(path: Sequence[str], raw: str) -> Any:
    reader = reader_for(path)
    try:
        return reader(raw)
    except ValueError as e:
        raise ConfigError(f"bad value for {'.'.join(path)}: {raw!r} ({e})") from e


def validate(cfg: Mapping[str, Any]) -> Mapping[str, Any]:
    """Reject unknown keys in the `ew` and `log` sections and non-positive degree deviations.

    Other top-level sections pass through untouched.
    """
    log_sec = cfg.get("log") or {}
    for key in log_sec:
        reader_for(("log", key))

    ew = cfg.get("ew") or {}
    for key, value in ew.items():
        if isinstance(value, Mapping):
            for sub in value:
                reader_for(("ew", key, str(sub).lower() if key == "degrees" else str(sub)))
        else:
            reader_for(("ew", key))

    for name, pct in (ew.get("degrees") or {}).items():
        try:
            ok = float(pct) > 0
        except (TypeError, ValueError):
            ok = False
        if not ok:
            raise ConfigError(f"degree {name} needs a positive deviation, got {pct!r}")
    return cfg
