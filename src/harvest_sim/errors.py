"""Exceptions shared by the simulation engine and lane generation."""

from __future__ import annotations

import math


class InvalidConfig(ValueError):
    """Raised when a configuration value makes the model undefined.

    Examples: a non-positive header width, tank capacity or unload rate.
    Invalid configuration is a programming error, not a runtime condition.
    """


def require_positive(name: str, value: float) -> float:
    """Return *value* as float, raising :class:`InvalidConfig` unless it is finite and > 0."""
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfig(f"{name} must be a number, got {value!r}") from exc
    if not math.isfinite(number) or number <= 0:
        raise InvalidConfig(f"{name} must be a finite value > 0, got {value!r}")
    return number
