"""Config sources for ewcount.

Each source yields a plain dict shaped like `schema`; `load_config` stacks
them as defaults < file < env < CLI overrides.
"""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Protocol

from .schema import ConfigError, read_value


class ConfigProvider(Protocol):
    name: str

    def load(self) -> Dict[str, Any]:
        ...


def merge_into(base: Dict[str, Any], layer: Mapping[str, Any]) -> Dict[str, Any]:
    """Overlay `layer` on `base` in place; nested sections merge key by key."""
    for key, value in layer.items():
        current = base.get(key)
        if isinstance(value, Mapping) and isinstance(current, dict):
            merge_into(current, value)
        elif isinstance(value, Mapping):
            base[key] = merge_into({}, value)
        else:
            base[key] = value
    return base


@dataclass
class DictProvider:
    data: Dict[str, Any] = field(default_factory=dict)
    name: str = "defaults"

    def load(self) -> Dict[str, Any]:
        return copy.deepcopy(self.data)


@dataclass
class FileProvider:
    """A .json or .toml file. A missing file raises FileNotFoundError."""

    path: str
    name: str = "file"

    def load(self) -> Dict[str, Any]:
        p = Path(self.path)
        text = p.read_text(encoding="utf-8")
        suffix = p.suffix.lower()
        if suffix == ".json":
            parse = json.loads
        elif suffix == ".toml":
            try:
                import tomllib  # py3.11+
            except ImportError as e:
                raise ConfigError(f"{self.path}: TOML config needs Python 3.11+") from e
            parse = tomllib.loads
        else:
            raise ConfigError(f"{self.path}: unsupported config format {suffix or '(none)'} (use .json or .toml)")

        try:
            data = parse(text)
        except ValueError as e:
            raise ConfigError(f"{self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{self.path}: top level must be an object")
        return data


@dataclass
class EnvProvider:
    """EWCOUNT_EW__PROJECTION__BARS_AHEAD=8 -> {"ew": {"projection": {"bars_ahead": 8}}}.

    Names are split on "__" and lowercased; each value is read with the type of
    its key (int, float, bool or a "lo,hi" pair) and unknown names raise
    ConfigError. Single-level names such as EWCOUNT_CONFIG or EWCOUNT_LOG_LEVEL
    are CLI defaults, not config keys, and are skipped.
    """

    prefix: str = "EWCOUNT_"
    environ: Optional[Mapping[str, str]] = None
    name: str = "env"

    def load(self) -> Dict[str, Any]:
        env = os.environ if self.environ is None else self.environ
        out: Dict[str, Any] = {}
        for key in sorted(env):
            if not key.startswith(self.prefix):
                continue
            path = key[len(self.prefix):].lower().split("__")
            if len(path) < 2:
                continue
            value = read_value(path, env[key])
            section = out
            for part in path[:-1]:
                section = section.setdefault(part, {})
            section[path[-1]] = value
        return out
