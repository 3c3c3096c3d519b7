"""Environment-driven configuration.

Entry points call :func:`dotenv.load_dotenv` first so a ``.env`` file in the
working directory can supply these variables.

========================================  ==============================
Variable                                  Field
========================================  ==============================
``HARVEST_SIM_TANK_CAPACITY_KG``          ``MachineConfig.tank_capacity_kg``
``HARVEST_SIM_UNLOAD_RATE_KG_PER_MIN``    ``MachineConfig.unload_rate_kg_per_min``
``HARVEST_SIM_YIELD_KG_PER_M2``           ``MachineConfig.yield_kg_per_m2``
``HARVEST_SIM_LOSS_ALARM_PCT``            ``MachineConfig.loss_alarm_pct``
``HARVEST_SIM_FIELD_WIDTH_M``             ``FieldConfig.width_m``
``HARVEST_SIM_FIELD_HEIGHT_M``            ``FieldConfig.height_m``
``HARVEST_SIM_HEADER_WIDTH_M``            ``FieldConfig.header_width_m``
========================================  ==============================
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import fields

from harvest_sim.errors import InvalidConfig
from harvest_sim.sim.models import FieldConfig, MachineConfig

_PREFIX = "HARVEST_SIM_"

_MACHINE_VARS = {
    "TANK_CAPACITY_KG": "tank_capacity_kg",
    "UNLOAD_RATE_KG_PER_MIN": "unload_rate_kg_per_min",
    "YIELD_KG_PER_M2": "yield_kg_per_m2",
    "LOSS_ALARM_PCT": "loss_alarm_pct",
}

_FIELD_VARS = {
    "FIELD_WIDTH_M": "width_m",
    "FIELD_HEIGHT_M": "height_m",
    "HEADER_WIDTH_M": "header_width_m",
}


def _read_floats(env: Mapping[str, str], names: dict[str, str]) -> dict[str, float]:
    values: dict[str, float] = {}
    for suffix, attr in names.items():
        raw = env.get(_PREFIX + suffix, "").strip()
        if not raw:
            continue
        try:
            values[attr] = float(raw)
        except ValueError as exc:
            raise InvalidConfig(f"{_PREFIX}{suffix} must be a number, got {raw!r}") from exc
    return values


def load_machine_config(env: Mapping[str, str] | None = None) -> MachineConfig:
    """Build a :class:`MachineConfig` from ``HARVEST_SIM_*`` variables over the defaults."""
    return MachineConfig(**_read_floats(os.environ if env is None else env, _MACHINE_VARS))


def load_field_config(env: Mapping[str, str] | None = None) -> FieldConfig:
    """Build a :class:`FieldConfig` from ``HARVEST_SIM_*`` variables over the defaults."""
    return FieldConfig(**_read_floats(os.environ if env is None else env, _FIELD_VARS))


def describe(config: MachineConfig | FieldConfig) -> dict[str, object]:
    """Flat dict of a config's fields, for logging and the API."""
    return {f.name: getattr(config, f.name) for f in fields(config)}
