"""Logging helpers.

  - setup_logging(LogConfig) configures the root logger (plain or JSON lines)
  - get_logger(name) for module loggers, e.g. get_logger("ewcount.chain")
"""

from __future__ import annotations

from .logger import JsonLineFormatter, LogConfig, get_logger, parse_level, setup_logging  # noqa: F401

__all__ = ["JsonLineFormatter", "LogConfig", "get_logger", "parse_level", "setup_logging"]
