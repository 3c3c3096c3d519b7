"""Environment-driven configuration."""

from __future__ import annotations

import pytest

from harvest_sim.config import describe, load_field_config, load_machine_config
from harvest_sim.errors import InvalidConfig
from harvest_sim.sim.models import FieldConfig, MachineConfig


def test_defaults_when_unset():
    assert load_machine_config({}) == MachineConfig()
    assert load_field_config({}) == FieldConfig()


def test_overrides():
    env = {
        "HARVEST_SIM_TANK_CAPACITY_KG": "9500",
        "HARVEST_SIM_UNLOAD_RATE_KG_PER_MIN": " 4200 ",
        "HARVEST_SIM_LOSS_ALARM_PCT": "2.5",
        "HARVEST_SIM_HEADER_WIDTH_M": "9.0",
    }
    machine = load_machine_config(env)
    assert machine.tank_capacity_kg == 9500.0
    assert machine.unload_rate_kg_per_min == 4200.0
    assert machine.alarm_threshold_pct == 2.5
    assert load_field_config(env).header_width_m == 9.0


def test_blank_value_keeps_default():
    assert load_machine_config({"HARVEST_SIM_TANK_CAPACITY_KG": ""}).tank_capacity_kg == 8000.0


def test_reads_process_environment(monkeypatch):
    monkeypatch.setenv("HARVEST_SIM_FIELD_WIDTH_M", "250")
    assert load_field_config().width_m == 250.0


@pytest.mark.parametrize(
    "env",
    [
        {"HARVEST_SIM_TANK_CAPACITY_KG": "lots"},
        {"HARVEST_SIM_TANK_CAPACITY_KG": "0"},
        {"HARVEST_SIM_UNLOAD_RATE_KG_PER_MIN": "-1"},
    ],
)
def test_invalid_machine_values(env):
    with pytest.raises(InvalidConfig):
        load_machine_config(env)


def test_invalid_header_width():
    with pytest.raises(InvalidConfig):
        load_field_config({"HARVEST_SIM_HEADER_WIDTH_M": "0"})


def test_describe():
    info = describe(FieldConfig())
    assert info["width_m"] == 600.0
    assert info["header_width_m"] == 7.5
