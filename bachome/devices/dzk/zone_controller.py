# bachome/devices/dzk/zone_controller.py
"""
Per-zone controller for the DZK-BACNET-3 interface.

Translates between the HomeKit thermostat model and the DZK objects of one
zone. Every public coroutine waits on the network; the non-blocking read
path lives in the accessory (see zone_accessory.py).

Per-zone characteristics:
  CurrentRelativeHumidity       zone "humidity"
  CurrentTemperature            zone "room-temperature"
  CoolingThresholdTemperature   zone "cold-set-point"
  HeatingThresholdTemperature   zone "heat-set-point"
  TargetTemperature             heat or cold set point, see below
  CurrentHeatingCoolingState    inferred from zone heating/cooling demand
  TargetHeatingCoolingState     global "dzk-operation-mode" (shared by zones)
  CurrentFanState               global "dzk-global-fan"

Target temperature:
  The DZK has separate heat and cold set points but HomeKit has one target
  temperature, and no DZK object tells whether AUTO is currently heating or
  cooling. In HEAT/COOL the matching set point is used. In AUTO/DRY the
  zone remembers the sign of the last nonzero demand it observed (heating
  minus cooling) and uses the heat set point when it is positive, the cold
  set point otherwise (including before any demand was seen). This is an
  approximation; under rapid mode changes it can pick the wrong set point.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from bachome.devices.dzk.characteristics import (
    CurrentFanState,
    CurrentHeatingCoolingState,
    DzkOperationMode,
    TargetHeatingCoolingState,
    TemperatureDisplayUnits,
    TemperatureUnit,
    current_state_from_demand,
    from_hap_target_heatcool_state,
    to_consumer_temperature,
    to_device_temperature,
    to_hap_fanstate,
    to_hap_target_heatcool_state,
)
from bachome.devices.dzk.object_directory import DirectoryEntry, require_writable
from bachome.devices.dzk.unit_state import GLOBAL_FAN_KEY, DzkUnitState
from bachome.exceptions import UnknownObjectError
from bachome.observability.logging_system import get_logger
from bachome.protocols.bacnet.types import ApplicationTag

HEAT_SET_POINT = "heat-set-point"
COLD_SET_POINT = "cold-set-point"


@dataclass
class ZoneState:
    """
    Cached characteristic values of one zone (consumer units, °C).

    Defaults are what the host sees before the first refresh completes.
    last_demand_sign: >0 heating seen last, <0 cooling seen last, 0 unknown.
    """

    current_heating_cooling_state: int = CurrentHeatingCoolingState.OFF
    target_heating_cooling_state: int = TargetHeatingCoolingState.OFF
    current_temperature: float = 20.5
    current_fan_state: int = CurrentFanState.INACTIVE
    cool_setpoint: float = 23.5
    heat_setpoint: float = 21.5
    target_temperature: float = 22.0
    relative_humidity: float = 42.2
    temperature_display_units: int = TemperatureDisplayUnits.FAHRENHEIT
    zone_on: bool = True
    last_demand_sign: float = 0


class DzkZoneController:
    def __init__(
        self,
        zone: int,
        unit: DzkUnitState,
        device_units: TemperatureUnit = TemperatureUnit.FAHRENHEIT,
        state: ZoneState | None = None,
    ):
        """
        Args:
            zone: Zone number 1..6
            unit: Shared unit state (address, operation mode, transport)
            device_units: Unit the DZK reports temperatures in
            state: Initial cache (defaults to ZoneState())

        Raises:
            UnknownObjectError: zone has no scope in the directory
        """
        if isinstance(zone, bool) or not isinstance(zone, int):
            raise UnknownObjectError(f"Zone must be an integer, got {zone!r}")

        self.zone = zone
        self.unit = unit
        self.device_units = device_units
        self.objects = unit.directory.entries(zone)
        self.state = state or ZoneState()

        self.logger = get_logger(f"{__name__}.zone{zone}", device=f"zone{zone}")
        self.logger.debug(f"DzkZoneController created: zone{zone}")

    # ----------------------------------------------------------------
    # Zone-scope present values
    # ----------------------------------------------------------------

    def _entry(self, key: str) -> DirectoryEntry:
        try:
            return self.objects[key]
        except KeyError:
            raise UnknownObjectError(f"No object {key!r} in zone{self.zone}") from None

    async def read_zone(self, key: str) -> Any:
        entry = self._entry(key)
        return await self.unit.protocol.read_present_value(
            self.unit.address, entry.reference
        )

    async def write_zone(
        self, key: str, value: Any, value_type: ApplicationTag | None = None
    ) -> Any:
        entry = require_writable(self._entry(key))
        return await self.unit.protocol.write_present_value(
            self.unit.address, entry.reference, value, value_type=value_type
        )

    async def _read_temperature(self, key: str) -> float:
        return to_consumer_temperature(await self.read_zone(key), self.device_units)

    async def _write_temperature(self, key: str, celsius: float) -> float:
        await self.write_zone(
            key,
            to_device_temperature(celsius, self.device_units),
            value_type=ApplicationTag.REAL,
        )
        return float(celsius)

    # ----------------------------------------------------------------
    # Heating/cooling state
    # ----------------------------------------------------------------

    async def get_current_heating_cooling_state(self) -> CurrentHeatingCoolingState:
        heating = await self.read_zone("heating-demand")
        cooling = await self.read_zone("cooling-demand")

        if heating > 0 or cooling > 0:
            self.state.last_demand_sign = heating - cooling

        return current_state_from_demand(heating, cooling)

    async def get_target_heating_cooling_state(self) -> TargetHeatingCoolingState:
        self.logger.debug("DzkZoneController.get_target_heating_cooling_state")
        mode = await self.unit.fetch_operation_mode()
        if mode is None:
            return TargetHeatingCoolingState.OFF
        return to_hap_target_heatcool_state(mode)

    async def set_target_heating_cooling_state(
        self, state: int
    ) -> TargetHeatingCoolingState:
        mode = from_hap_target_heatcool_state(state)
        self.logger.debug(
            f"DzkZoneController.set_target_heating_cooling_state: {state} -> {mode.name}"
        )
        await self.unit.write_operation_mode(mode)
        return to_hap_target_heatcool_state(mode)

    def cached_target_heating_cooling_state(self) -> int:
        """Target state from the shared mode, or the zone cache while unknown."""
        if self.unit.operation_mode is None:
            return self.state.target_heating_cooling_state
        return to_hap_target_heatcool_state(self.unit.operation_mode)

    # ----------------------------------------------------------------
    # Direct reads/writes
    # ----------------------------------------------------------------

    async def get_current_temperature(self) -> float:
        return await self._read_temperature("room-temperature")

    async def get_current_relative_humidity(self) -> float:
        return float(await self.read_zone("humidity"))

    async def get_current_fan_state(self) -> CurrentFanState:
        # fan is global; see also global "iu-speed" and zone "local-ventilation"
        return to_hap_fanstate(await self.unit.read_global(GLOBAL_FAN_KEY))

    async def get_heat_setpoint(self) -> float:
        return await self._read_temperature(HEAT_SET_POINT)

    async def set_heat_setpoint(self, celsius: float) -> float:
        return await self._write_temperature(HEAT_SET_POINT, celsius)

    async def get_cool_setpoint(self) -> float:
        return await self._read_temperature(COLD_SET_POINT)

    async def set_cool_setpoint(self, celsius: float) -> float:
        return await self._write_temperature(COLD_SET_POINT, celsius)

    async def get_zone_on(self) -> bool:
        return bool(await self.read_zone("onoff"))

    async def set_zone_on(self, on: bool) -> bool:
        await self.write_zone("onoff", 1 if on else 0, value_type=ApplicationTag.ENUMERATED)
        return bool(on)

    # ----------------------------------------------------------------
    # Target temperature (set point arbitration)
    # ----------------------------------------------------------------

    def target_setpoint_key(self) -> str:
        mode = self.unit.operation_mode
        if mode == DzkOperationMode.HEAT:
            return HEAT_SET_POINT
        if mode == DzkOperationMode.COOL:
            return COLD_SET_POINT
        # AUTO, DRY or not yet known
        return HEAT_SET_POINT if self.state.last_demand_sign > 0 else COLD_SET_POINT

    async def get_target_temperature(self) -> float:
        key = self.target_setpoint_key()
        self.logger.debug(
            f"zone{self.zone} target temperature from {key} "
            f"(lastDemand: {self.state.last_demand_sign})"
        )
        return await self._read_temperature(key)

    async def set_target_temperature(self, celsius: float) -> float:
        key = self.target_setpoint_key()
        self.logger.debug(
            f"zone{self.zone} target temperature to {key} "
            f"(lastDemand: {self.state.last_demand_sign})"
        )
        return await self._write_temperature(key, celsius)

    # ----------------------------------------------------------------
    # Display units (local only)
    # ----------------------------------------------------------------

    def get_temperature_display_units(self) -> int:
        return self.state.temperature_display_units

    def set_temperature_display_units(self, units: int) -> None:
        self.state.temperature_display_units = TemperatureDisplayUnits(int(units))
