"""Layered config for ewcount.

  - load_config(defaults, file_path, use_env=True, env_prefix="EWCOUNT_", overrides=None) -> dict
  - sources: DictProvider, FileProvider (.json/.toml), EnvProvider (EWCOUNT_SECTION__KEY)
  - schema: typed env values, unknown-key checks, ConfigError
"""

from __future__ import annotations

from .loader import load_config  # noqa: F401
from .providers import DictProvider, EnvProvider, FileProvider, merge_into  # noqa: F401
from .schema import ConfigError, reader_for, validate  # noqa: F401

__all__ = [
    "load_config",
    "ConfigError",
    "DictProvider",
    "EnvProvider",
    "FileProvider",
    "merge_into",
    "reader_for",
    "validate",
]
