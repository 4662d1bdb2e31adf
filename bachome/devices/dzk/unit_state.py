# bachome/devices/dzk/unit_state.py
"""
State shared by every zone of one DZK unit.

All zones are served by one physical unit: one network address and one
operation mode. The platform constructs a single DzkUnitState and hands the
same instance to every zone controller.

No lock is taken. Updates are single scalar assignments and a stale mode is
an accepted steady state: the unit is the source of truth and the next
refresh converges.
"""

from __future__ import annotations

from typing import Any

from bachome.devices.dzk.characteristics import DzkOperationMode
from bachome.devices.dzk.object_directory import (
    GLOBAL_SCOPE,
    ObjectDirectory,
    require_writable,
)
from bachome.observability.logging_system import BridgeLogger, get_logger
from bachome.protocols.bacnet.bacnet_protocol import BACnetProtocol
from bachome.protocols.bacnet.types import ApplicationTag

OPERATION_MODE_KEY = "dzk-operation-mode"
GLOBAL_FAN_KEY = "dzk-global-fan"


class DzkUnitState:
    """
    Device address + global operation mode, plus global-scope I/O.

    Attributes:
        address: BACnet address of the unit ("" until set)
        operation_mode: Last known DzkOperationMode, None while unknown
    """

    def __init__(
        self,
        protocol: BACnetProtocol,
        directory: ObjectDirectory,
        address: str = "",
        logger: BridgeLogger | None = None,
    ):
        self.protocol = protocol
        self.directory = directory
        self.address = ""
        self.operation_mode: DzkOperationMode | None = None
        self.logger = logger or get_logger(f"{__name__}.unit", device="dzk-unit")

        if address:
            self.set_address(address)

    def set_address(self, address: str) -> bool:
        """Set the unit address once. Returns False if it was already set."""
        if self.address:
            if address != self.address:
                self.logger.debug(
                    f"Ignoring address {address!r}, unit already at {self.address!r}"
                )
            return False
        self.address = address
        return True

    # ----------------------------------------------------------------
    # Global-scope present values
    # ----------------------------------------------------------------

    async def read_global(self, key: str) -> Any:
        entry = self.directory.lookup(GLOBAL_SCOPE, key)
        return await self.protocol.read_present_value(self.address, entry.reference)

    async def write_global(
        self, key: str, value: Any, value_type: ApplicationTag | None = None
    ) -> Any:
        entry = require_writable(self.directory.lookup(GLOBAL_SCOPE, key))
        return await self.protocol.write_present_value(
            self.address, entry.reference, value, value_type=value_type
        )

    # ----------------------------------------------------------------
    # Operation mode
    # ----------------------------------------------------------------

    async def fetch_operation_mode(self) -> DzkOperationMode | None:
        """Read the operation mode and update the shared cache."""
        value = await self.read_global(OPERATION_MODE_KEY)
        try:
            self.operation_mode = DzkOperationMode(int(value))
        except (TypeError, ValueError):
            self.logger.warning(f"Unit reported unknown operation mode {value!r}")
            self.operation_mode = None
        return self.operation_mode

    async def write_operation_mode(self, mode: DzkOperationMode) -> DzkOperationMode:
        """Write the operation mode; the shared cache follows on success."""
        mode = DzkOperationMode(mode)
        await self.write_global(
            OPERATION_MODE_KEY, int(mode), value_type=ApplicationTag.UNSIGNED_INT
        )
        self.operation_mode = mode
        return mode
