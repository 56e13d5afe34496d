from __future__ import annotations

import logging
import os
from typing import Optional

_LEVEL_MAP = {
    "none": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

ENV_LEVEL = "TREMAS_LOG_LEVEL"

# silent unless init_logging() is called
logging.getLogger("tremas").addHandler(logging.NullHandler())


def _normalize(level: Optional[str]) -> int:
    if not level:
        return logging.WARNING
    return _LEVEL_MAP.get(str(level).strip().lower(), logging.WARNING)


def init_logging(level: int | str | None = None) -> None:
    """
    Install one stream handler on the root logger and set the ``tremas`` level.
    Repeated calls may change the level but never add a second handler.
    ``TREMAS_LOG_LEVEL`` wins over ``level`` when set.
    """
    env = os.getenv(ENV_LEVEL)
    if env:
        level = env
    lvl = _normalize(level) if isinstance(level, str) or level is None else int(level)

    fmt = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
    datefmt = "%H:%M:%S"

    root = logging.getLogger()
    if not any(getattr(h, "_tremas", False) for h in root.handlers):
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(fmt=fmt, datefmt=datefmt))
        h._tremas = True  # type: ignore[attr-defined]
        root.addHandler(h)

    logging.getLogger("tremas").setLevel(lvl)


def init_logging_from_cfg(cfg) -> None:
    """Apply the ``logging`` section of a :class:`~tremas.config.TremasConfig`."""
    section = getattr(cfg, "logging", None)
    init_logging(getattr(section, "level", None))
