from __future__ import annotations

import importlib
import os
import sys
from typing import Optional


def _has_display() -> bool:
    if sys.platform.startswith("linux"):
        return bool(os.environ.get("DISPLAY") or os.environ.get("WAYLAND_DISPLAY"))
    return True


def _module_available(name: str) -> bool:
    try:
        importlib.import_module(name)
    except ImportError:
        return False
    return True


_INTERACTIVE = {
    "tkagg": "tkinter",
    "qtagg": "PyQt5",
    "qt5agg": "PyQt5",
}


def detect_backend(prefer: str = "TkAgg") -> str:
    """Pick an interactive backend when a display exists, else ``Agg``."""
    env = os.environ.get("MPLBACKEND")
    if env:
        return env
    needs = _INTERACTIVE.get(prefer.lower())
    if needs and _has_display() and _module_available(needs):
        return prefer
    return "Agg"


def setup_matplotlib_backend(
    prefer: str = "TkAgg", fallback: str = "Agg", force: Optional[str] = None
) -> str:
    """Select the matplotlib backend before ``pyplot`` is imported.

    Once pyplot is loaded the active backend is returned unchanged.
    """
    import matplotlib

    if "matplotlib.pyplot" in sys.modules:
        return matplotlib.get_backend()

    backend = force or detect_backend(prefer=prefer)
    if force is None and backend.lower() != prefer.lower() and "MPLBACKEND" not in os.environ:
        backend = fallback
    try:
        matplotlib.use(backend, force=True)
    except (ImportError, ValueError):
        matplotlib.use(fallback, force=True)
    importlib.import_module("matplotlib.pyplot")
    return matplotlib.get_backend()


__all__ = ["detect_backend", "setup_matplotlib_backend"]
