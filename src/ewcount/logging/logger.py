"""Logging for ewcount.

One stderr handler (plain text or JSON lines) plus an optional file handler
on the root logger. Engine modules attach structured fields with `extra=`
(degree, pct, score, label ...); in JSON mode those become top-level keys,
enums are written by value and wave points through `to_dict()`.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

LEVEL_NAMES = ("debug", "info", "warning", "error", "critical")
PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# attributes every LogRecord carries; anything else came in through `extra=`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def parse_level(name: str) -> int:
    key = (name or "info").strip().lower()
    if key == "warn":
        key = "warning"
    if key not in LEVEL_NAMES:
        raise ValueError(f"unknown log level {name!r} (use one of {', '.join(LEVEL_NAMES)})")
    return getattr(logging, key.upper())


@dataclass(frozen=True)
class LogConfig:
    level: str = "info"
    json: bool = False
    to_file: Optional[str] = None
    utc: bool = True

    @staticmethod
    def from_config(cfg: Mapping[str, Any]) -> "LogConfig":
        """Read the `log` section of a loaded config dict."""
        sec = cfg.get("log") or {}
        return LogConfig(
            level=str(sec.get("level", "info")),
            json=bool(sec.get("json", False)),
            to_file=sec.get("to_file") or None,
            utc=bool(sec.get("utc", True)),
        )


def _field_value(v: Any) -> Any:
    if isinstance(v, Enum):
        return v.value
    to_dict = getattr(v, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return str(v)


class JsonLineFormatter(logging.Formatter):
    def __init__(self, utc: bool = True):
        super().__init__()
        self.utc = utc

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc if self.utc else None)
        line: Dict[str, Any] = {
            "ts": created.isoformat(timespec="milliseconds"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "msg": record.getMessage(),
        }
        line.update(
            (k, v) for k, v in vars(record).items() if k not in _RECORD_ATTRS and not k.startswith("_")
        )
        if record.exc_info:
            line["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=_field_value)


def _formatter(cfg: LogConfig) -> logging.Formatter:
    if cfg.json:
        return JsonLineFormatter(utc=cfg.utc)
    fmt = logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    if cfg.utc:
        fmt.converter = time.gmtime
    return fmt


def _handlers(cfg: LogConfig) -> List[logging.Handler]:
    out: List[logging.Handler] = [logging.StreamHandler()]
    if cfg.to_file:
        Path(cfg.to_file).parent.mkdir(parents=True, exist_ok=True)
        out.append(logging.FileHandler(cfg.to_file, encoding="utf-8"))
    return out


def setup_logging(cfg: LogConfig) -> None:
    """Replace the root handlers. Raises ValueError for an unknown level."""
    level = parse_level(cfg.level)
    fmt = _formatter(cfg)
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in _handlers(cfg):
        h.setFormatter(fmt)
        root.addHandler(h)
    root.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
