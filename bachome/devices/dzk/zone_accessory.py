# bachome/devices/dzk/zone_accessory.py
"""
Thermostat accessory for one DZK zone.

The host's characteristic handlers must not wait on the network. Every
getter here returns the cached value immediately and schedules a refresh
task; the refreshed value is what the *next* call returns. Every setter
returns immediately and schedules the write. Failures are logged (and kept
in the logger's event trail) but never raised to the host: a failing zone
keeps showing its last known values.

Refreshes are independent tasks. Two overlapping refreshes of the same
characteristic may complete out of order and the later completion wins.

All methods must be called from the running event loop.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from bachome.devices.dzk.characteristics import TemperatureDisplayUnits
from bachome.devices.dzk.zone_controller import DzkZoneController
from bachome.exceptions import BachomeError
from bachome.observability.logging_system import BridgeLogger, get_logger


class DzkZoneAccessory:
    """
    Stale-read/refresh bridge in front of a DzkZoneController.

    Example:
        >>> accessory = DzkZoneAccessory("Living room", controller)
        >>> accessory.get_current_temperature()   # cached value, no wait
        20.5
        >>> await accessory.settle()              # refresh done
        >>> accessory.get_current_temperature()
        21.7
    """

    MANUFACTURER = "Daikin"
    MODEL = "DZK-BACNET-3"

    def __init__(self, name: str, controller: DzkZoneController):
        self.name = name
        self.controller = controller
        self.zone = controller.zone
        self.state = controller.state

        self.logger: BridgeLogger = get_logger(
            f"{__name__}.zone{self.zone}", device=f"zone{self.zone}"
        )
        self._tasks: set[asyncio.Task] = set()

    @property
    def serial_number(self) -> str:
        return f"{self.MODEL}-zone-{self.zone}"

    # ----------------------------------------------------------------
    # Task bookkeeping
    # ----------------------------------------------------------------

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _schedule(
        self,
        op: str,
        call: Callable[..., Awaitable[Any]],
        *args: Any,
        apply: Callable[[Any], None] | None = None,
    ) -> asyncio.Task:
        self.logger.debug(op)
        loop = asyncio.get_running_loop()
        task = loop.create_task(
            self._run(op, call, args, apply), name=f"{op}.zone{self.zone}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(
        self,
        op: str,
        call: Callable[..., Awaitable[Any]],
        args: tuple,
        apply: Callable[[Any], None] | None,
    ) -> Any:
        try:
            result = await call(*args)
        except BachomeError as err:
            await self.logger.log_transport_failure(
                f"{op}.zone{self.zone}", err, data={"zone": self.zone}
            )
            return None

        if apply is not None:
            apply(result)
        return result

    async def settle(self) -> None:
        """Wait until every scheduled refresh/write has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ----------------------------------------------------------------
    # Heating/cooling state
    # ----------------------------------------------------------------

    def get_current_heating_cooling_state(self) -> int:
        self._schedule(
            "getCurrentHeatingCoolingState",
            self.controller.get_current_heating_cooling_state,
            apply=lambda v: setattr(self.state, "current_heating_cooling_state", int(v)),
        )
        return self.state.current_heating_cooling_state

    def get_target_heating_cooling_state(self) -> int:
        self._schedule(
            "getTargetHeatingCoolingState",
            self.controller.get_target_heating_cooling_state,
            apply=lambda v: setattr(self.state, "target_heating_cooling_state", int(v)),
        )
        return self.controller.cached_target_heating_cooling_state()

    def set_target_heating_cooling_state(self, value: int) -> None:
        def _applied(state: int) -> None:
            self.state.target_heating_cooling_state = int(state)
            self._schedule_audit(
                f"zone{self.zone} set target heating/cooling state {value} "
                f"(unit mode {self.controller.unit.operation_mode!r})",
                action="set_target_heating_cooling_state",
            )

        self._schedule(
            "setTargetHeatingCoolingState",
            self.controller.set_target_heating_cooling_state,
            int(value),
            apply=_applied,
        )

    def _schedule_audit(self, message: str, action: str) -> None:
        task = asyncio.get_running_loop().create_task(
            self.logger.log_audit(message, action=action, data={"zone": self.zone})
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ----------------------------------------------------------------
    # Temperatures, humidity, fan
    # ----------------------------------------------------------------

    def get_current_temperature(self) -> float:
        self._schedule(
            "getCurrentTemperature",
            self.controller.get_current_temperature,
            apply=lambda v: setattr(self.state, "current_temperature", v),
        )
        return self.state.current_temperature

    def get_current_relative_humidity(self) -> float:
        self._schedule(
            "getCurrentRelativeHumidity",
            self.controller.get_current_relative_humidity,
            apply=lambda v: setattr(self.state, "relative_humidity", v),
        )
        return self.state.relative_humidity

    def get_current_fan_state(self) -> int:
        self._schedule(
            "getCurrentFanState",
            self.controller.get_current_fan_state,
            apply=lambda v: setattr(self.state, "current_fan_state", int(v)),
        )
        return self.state.current_fan_state

    def get_target_temperature(self) -> float:
        self._schedule(
            "getTargetTemperature",
            self.controller.get_target_temperature,
            apply=lambda v: setattr(self.state, "target_temperature", v),
        )
        return self.state.target_temperature

    def set_target_temperature(self, value: float) -> None:
        self._schedule(
            "setTargetTemperature",
            self.controller.set_target_temperature,
            float(value),
            apply=lambda v: setattr(self.state, "target_temperature", v),
        )

    def get_heating_threshold_temperature(self) -> float:
        self._schedule(
            "getHeatingThresholdTemperature",
            self.controller.get_heat_setpoint,
            apply=lambda v: setattr(self.state, "heat_setpoint", v),
        )
        return self.state.heat_setpoint

    def set_heating_threshold_temperature(self, value: float) -> None:
        self._schedule(
            "setHeatingThresholdTemperature",
            self.controller.set_heat_setpoint,
            float(value),
            apply=lambda v: setattr(self.state, "heat_setpoint", v),
        )

    def get_cooling_threshold_temperature(self) -> float:
        self._schedule(
            "getCoolingThresholdTemperature",
            self.controller.get_cool_setpoint,
            apply=lambda v: setattr(self.state, "cool_setpoint", v),
        )
        return self.state.cool_setpoint

    def set_cooling_threshold_temperature(self, value: float) -> None:
        self._schedule(
            "setCoolingThresholdTemperature",
            self.controller.set_cool_setpoint,
            float(value),
            apply=lambda v: setattr(self.state, "cool_setpoint", v),
        )

    # ----------------------------------------------------------------
    # Zone on/off
    # ----------------------------------------------------------------

    def get_zone_on(self) -> bool:
        self._schedule(
            "getZoneOn",
            self.controller.get_zone_on,
            apply=lambda v: setattr(self.state, "zone_on", v),
        )
        return self.state.zone_on

    def set_zone_on(self, on: bool) -> None:
        self._schedule(
            "setZoneOn",
            self.controller.set_zone_on,
            bool(on),
            apply=lambda v: setattr(self.state, "zone_on", v),
        )

    # ----------------------------------------------------------------
    # Display units (local cache only)
    # ----------------------------------------------------------------

    def get_temperature_display_units(self) -> int:
        self.logger.debug("GET TemperatureDisplayUnits")
        return self.controller.get_temperature_display_units()

    def set_temperature_display_units(self, value: int) -> None:
        self.logger.debug("SET TemperatureDisplayUnits")
        self.controller.set_temperature_display_units(TemperatureDisplayUnits(int(value)))

    # ----------------------------------------------------------------
    # Bulk access
    # ----------------------------------------------------------------

    def refresh_all(self) -> dict[str, Any]:
        """Call every network-backed getter; returns the values served."""
        return {
            "current_heating_cooling_state": self.get_current_heating_cooling_state(),
            "target_heating_cooling_state": self.get_target_heating_cooling_state(),
            "current_temperature": self.get_current_temperature(),
            "target_temperature": self.get_target_temperature(),
            "heating_threshold_temperature": self.get_heating_threshold_temperature(),
            "cooling_threshold_temperature": self.get_cooling_threshold_temperature(),
            "current_relative_humidity": self.get_current_relative_humidity(),
            "current_fan_state": self.get_current_fan_state(),
            "zone_on": self.get_zone_on(),
        }

    def snapshot(self) -> dict[str, Any]:
        """Cached values without scheduling anything."""
        return {
            "name": self.name,
            "zone": self.zone,
            "current_heating_cooling_state": self.state.current_heating_cooling_state,
            "target_heating_cooling_state": self.controller.cached_target_heating_cooling_state(),
            "current_temperature": self.state.current_temperature,
            "target_temperature": self.state.target_temperature,
            "heating_threshold_temperature": self.state.heat_setpoint,
            "cooling_threshold_temperature": self.state.cool_setpoint,
            "current_relative_humidity": self.state.relative_humidity,
            "current_fan_state": self.state.current_fan_state,
            "temperature_display_units": self.state.temperature_display_units,
            "zone_on": self.state.zone_on,
        }
