"""Runtime defaults, overridable from the environment."""

from __future__ import annotations

import os


def env_float(name: str, default: float) -> float:
    """Read a float setting from the environment, naming it on bad input."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


# Canvas width used until the shell reports a real measurement
DEFAULT_CANVAS_WIDTH = env_float("CAN_NETWORK_CANVAS_WIDTH", 800)

# A dragged ECU counts as "above" when it ends this far above the first bus
DRAG_THRESHOLD_OFFSET = env_float("CAN_NETWORK_DRAG_THRESHOLD", 50)
