"""Frame timing shared by the per-frame drivers."""

from __future__ import annotations

import math

MAX_FRAME_MS = 200.0
"""Largest per-frame delta accepted; longer stalls (e.g. a backgrounded process) are clamped."""


def clamp_frame_ms(delta_ms: float) -> float:
    """Clamp a frame delta to ``[0, MAX_FRAME_MS]``; non-finite input counts as 0."""
    if not math.isfinite(delta_ms) or delta_ms <= 0:
        return 0.0
    return min(delta_ms, MAX_FRAME_MS)
