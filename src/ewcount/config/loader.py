from __future__ import annotations

from typing import Any, Dict, List, Optional

from .providers import ConfigProvider, DictProvider, EnvProvider, FileProvider, merge_into
from .schema import validate

DEFAULT_ENV_PREFIX = "EWCOUNT_"


def load_config(
    defaults: Optional[Dict[str, Any]] = None,
    file_path: Optional[str] = None,
    *,
    use_env: bool = True,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Stack defaults < file < env < overrides (CLI flags) and check the result.

    Raises FileNotFoundError for a missing file and ConfigError (a ValueError)
    for a malformed file, an unknown `ew`/`log` key or an unreadable value.
    """
    layers: List[ConfigProvider] = [DictProvider(dict(defaults or {}))]
    if file_path:
        layers.append(FileProvider(file_path))
    if use_env:
        layers.append(EnvProvider(prefix=env_prefix))
    if overrides:
        layers.append(DictProvider(dict(overrides), name="overrides"))

    cfg: Dict[str, Any] = {}
    for layer in layers:
        merge_into(cfg, layer.load())
    validate(cfg)
    return cfg
