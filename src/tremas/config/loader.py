"""YAML configuration loader."""
from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .schema import TremasConfig

__all__ = ["deep_update", "read_yaml", "load_config"]

_TOP_LEVEL = set(TremasConfig.model_fields)


def deep_update(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return a copy of ``base`` with ``override`` merged in recursively."""
    out = deepcopy(dict(base))
    for k, v in override.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = deepcopy(v)
    return out


def read_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Top-level YAML at {path} must be a mapping")
    return data


def _ensure_known(d: Mapping[str, Any], where: str) -> None:
    extra = set(d) - _TOP_LEVEL
    if extra:
        raise ValueError(f"unexpected top-level keys in {where}: {sorted(extra)}")


def load_config(
    path: str | Path | None = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> TremasConfig:
    """Load ``path`` (optional) merged with ``overrides`` into a validated config.

    Missing sections fall back to the model defaults.
    """
    raw: Dict[str, Any] = {}
    if path is not None:
        if not Path(path).exists():
            raise FileNotFoundError(f"config not found: {path}")
        raw = read_yaml(path)
        _ensure_known(raw, str(path))
    if overrides:
        _ensure_known(overrides, "overrides")
        raw = deep_update(raw, overrides)
    return TremasConfig.model_validate(raw)
