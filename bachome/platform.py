# bachome/platform.py
"""
Bridge platform: wires one DZK unit to its zone accessories.

Startup is two-phase:
  1. Connect the transport, build the shared unit state and fetch the
     operation mode once (a failure is logged and the mode stays unknown).
  2. Build one controller + accessory per configured zone.

Every zone therefore starts with the same view of the operation mode, and
no zone's construction depends on another zone having been built first.
"""

from pathlib import Path
from typing import Any

from bachome.config.config_loader import ConfigLoader
from bachome.devices.dzk.characteristics import TemperatureUnit
from bachome.devices.dzk.object_directory import ObjectDirectory
from bachome.devices.dzk.unit_state import DzkUnitState
from bachome.devices.dzk.zone_accessory import DzkZoneAccessory
from bachome.devices.dzk.zone_controller import DzkZoneController
from bachome.exceptions import TransportError
from bachome.observability.logging_system import (
    EventCategory,
    EventSeverity,
    configure_logging,
    get_logger,
)
from bachome.protocols.bacnet.bacnet_protocol import BACnetProtocol
from bachome.protocols.bacnet.bacpypes3_adapter import Bacpypes3Adapter


class BachomePlatform:
    """
    Owns the transport, the shared unit state and the zone accessories.

    Example:
        >>> platform = BachomePlatform.from_config_dir("config")
        >>> await platform.start()
        >>> platform.accessories[1].get_current_temperature()
        20.5
        >>> await platform.stop()
    """

    def __init__(
        self,
        config: dict[str, Any],
        adapter=None,
        directory: ObjectDirectory | None = None,
    ):
        """
        Args:
            config: Normalised "dzk" section from ConfigLoader
            adapter: BACnet adapter (defaults to Bacpypes3Adapter from config)
            directory: Object directory (defaults to the bundled DZK table)
        """
        self.config = config
        units = config.get("device_units", TemperatureUnit.FAHRENHEIT)
        if not isinstance(units, TemperatureUnit):
            units = TemperatureUnit.parse(units)
        self.device_units = units

        self.adapter = adapter or Bacpypes3Adapter(
            local_address=config.get("local_address", "0.0.0.0"),
            device_id=config.get("device_id", 599),
            device_name=config.get("device_name", "bachome"),
            timeout=config.get("timeout", 5.0),
        )
        self.protocol = BACnetProtocol(self.adapter)
        self.directory = directory or ObjectDirectory.load()
        self.unit = DzkUnitState(self.protocol, self.directory, address=config["address"])

        self.accessories: dict[int, DzkZoneAccessory] = {}
        self.started = False

        self.logger = get_logger(__name__, device="platform")

    @classmethod
    def from_config_dir(cls, config_dir: Path | str = "config", **kwargs) -> "BachomePlatform":
        """Load configuration (and apply its logging settings) then build."""
        config = ConfigLoader(config_dir).load_all()

        logging_config = config["logging"]
        configure_logging(
            log_dir=logging_config["log_dir"] if logging_config["json"] else None,
            level=logging_config["level"],
        )

        return cls(config["dzk"], **kwargs)

    # ----------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------

    async def start(self) -> None:
        if self.started:
            return

        await self.protocol.connect()
        await self.logger.log_event(
            EventSeverity.INFO,
            EventCategory.SYSTEM,
            f"Connected to DZK at {self.unit.address}",
        )

        # phase 1: shared state
        try:
            mode = await self.unit.fetch_operation_mode()
            self.logger.info(f"DZK operation mode: {mode.name if mode else 'unknown'}")
        except TransportError as err:
            await self.logger.log_transport_failure(
                "fetchOperationMode", err, data={"address": self.unit.address}
            )

        # phase 2: zones
        for zone_config in self.config.get("zones", []):
            self.add_zone(zone_config["zone"], zone_config.get("name", ""))

        self.started = True

    async def stop(self) -> None:
        for accessory in self.accessories.values():
            await accessory.settle()

        await self.protocol.disconnect()
        self.started = False
        self.logger.info("Platform stopped")

    def add_zone(self, zone: int, name: str = "") -> DzkZoneAccessory | None:
        """Build the accessory for one zone; duplicates are skipped."""
        if zone in self.accessories:
            self.logger.warning(f"Zone {zone} configured more than once, skipping {name!r}")
            return None

        controller = DzkZoneController(zone, self.unit, device_units=self.device_units)
        accessory = DzkZoneAccessory(name or f"Zone {zone}", controller)
        self.accessories[zone] = accessory

        self.logger.info(f"Adding zone accessory: {accessory.name} ({accessory.serial_number})")
        return accessory

    async def settle(self) -> None:
        for accessory in self.accessories.values():
            await accessory.settle()

    # ----------------------------------------------------------------
    # Introspection
    # ----------------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        mode = self.unit.operation_mode
        return {
            "address": self.unit.address,
            "operation_mode": mode.name if mode is not None else None,
            "zones": {zone: acc.snapshot() for zone, acc in sorted(self.accessories.items())},
        }
