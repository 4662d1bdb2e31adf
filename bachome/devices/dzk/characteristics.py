# bachome/devices/dzk/characteristics.py
"""
Characteristic values on both sides of the bridge.

Consumer side: HomeKit thermostat characteristic enumerations.
Device side: DZK operation modes.

Mapping notes:
- DZK DRY has no HomeKit counterpart and is reported as COOL; this is lossy,
  a DRY unit read back and written again becomes COOL.
- HomeKit OFF is written as DZK AUTO. There is no device stop reachable
  from the operation mode object (stopping the unit is a user-mode change).
"""

from __future__ import annotations

from enum import Enum, IntEnum


# ----------------------------------------------------------------
# HomeKit characteristics
# ----------------------------------------------------------------


class TemperatureDisplayUnits(IntEnum):
    CELSIUS = 0
    FAHRENHEIT = 1


class CurrentHeatingCoolingState(IntEnum):
    OFF = 0
    HEAT = 1
    COOL = 2


class TargetHeatingCoolingState(IntEnum):
    OFF = 0
    HEAT = 1
    COOL = 2
    AUTO = 3


class CurrentFanState(IntEnum):
    INACTIVE = 0
    IDLE = 1
    BLOWING_AIR = 2


# ----------------------------------------------------------------
# DZK device values
# ----------------------------------------------------------------


class DzkOperationMode(IntEnum):
    AUTO = 1
    COOL = 2
    HEAT = 3
    DRY = 4


class TemperatureUnit(Enum):
    """Unit the DZK reports temperatures in (configured, not discovered)."""

    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"

    @classmethod
    def parse(cls, text: str) -> TemperatureUnit:
        value = text.strip().lower()
        if value in ("f", "fahrenheit"):
            return cls.FAHRENHEIT
        if value in ("c", "celsius"):
            return cls.CELSIUS
        raise ValueError(f"Unknown temperature unit: {text!r}")


# ----------------------------------------------------------------
# Temperature conversion
# ----------------------------------------------------------------


def f2c(ff: float) -> float:
    return (ff - 32) * 5 / 9


def c2f(cc: float) -> float:
    return cc * 9 / 5 + 32


def to_consumer_temperature(value: float, device_units: TemperatureUnit) -> float:
    """Device reading -> Celsius."""
    if device_units is TemperatureUnit.FAHRENHEIT:
        return f2c(value)
    return float(value)


def to_device_temperature(value: float, device_units: TemperatureUnit) -> float:
    """Celsius -> device units."""
    if device_units is TemperatureUnit.FAHRENHEIT:
        return c2f(value)
    return float(value)


# ----------------------------------------------------------------
# Mode mapping
# ----------------------------------------------------------------

_TO_HAP_TARGET = {
    DzkOperationMode.AUTO: TargetHeatingCoolingState.AUTO,
    DzkOperationMode.COOL: TargetHeatingCoolingState.COOL,
    DzkOperationMode.HEAT: TargetHeatingCoolingState.HEAT,
    DzkOperationMode.DRY: TargetHeatingCoolingState.COOL,
}

_FROM_HAP_TARGET = {
    TargetHeatingCoolingState.OFF: DzkOperationMode.AUTO,
    TargetHeatingCoolingState.HEAT: DzkOperationMode.HEAT,
    TargetHeatingCoolingState.COOL: DzkOperationMode.COOL,
    TargetHeatingCoolingState.AUTO: DzkOperationMode.AUTO,
}


def to_hap_target_heatcool_state(mode: int) -> TargetHeatingCoolingState:
    """DZK operation mode -> target state; unrecognised values read as OFF."""
    try:
        return _TO_HAP_TARGET[DzkOperationMode(int(mode))]
    except ValueError:
        return TargetHeatingCoolingState.OFF


def from_hap_target_heatcool_state(state: int) -> DzkOperationMode:
    """Target state -> DZK operation mode; unrecognised values write AUTO."""
    try:
        return _FROM_HAP_TARGET[TargetHeatingCoolingState(int(state))]
    except ValueError:
        return DzkOperationMode.AUTO


def to_hap_fanstate(value: float) -> CurrentFanState:
    # IDLE is not derivable from the DZK objects
    return CurrentFanState.INACTIVE if value == 0 else CurrentFanState.BLOWING_AIR


def current_state_from_demand(
    heating: float, cooling: float
) -> CurrentHeatingCoolingState:
    """
    Infer current state from zone demands.

    pred = (cooling > 0) << 1 | (heating > 0)
      0 no demand         -> OFF
      1 heating demand    -> HEAT
      2 cooling demand    -> COOL
      3 both (anomalous)  -> OFF
    """
    pred = (2 if cooling > 0 else 0) | (1 if heating > 0 else 0)
    if pred == 1:
        return CurrentHeatingCoolingState.HEAT
    if pred == 2:
        return CurrentHeatingCoolingState.COOL
    return CurrentHeatingCoolingState.OFF
