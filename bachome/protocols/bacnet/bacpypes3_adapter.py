# bachome/protocols/bacnet/bacpypes3_adapter.py
"""
BACnet/IP adapter using bacpypes3.

Transport-only adapter.
No directory knowledge.
No unit conversion.
No retries.
"""

import asyncio
from typing import Any

from bacpypes3.ipv4.app import NormalApplication
from bacpypes3.local.device import DeviceObject
from bacpypes3.pdu import Address
from bacpypes3.primitivedata import (
    Boolean,
    Double,
    Enumerated,
    Integer,
    ObjectIdentifier,
    Real,
    Unsigned,
)

from bachome.protocols.bacnet.types import ApplicationTag, ObjectReference

PRESENT_VALUE = "present-value"

# Application tag -> bacpypes3 primitive used to encode a written value
TAG_ENCODERS = {
    ApplicationTag.BOOLEAN: Boolean,
    ApplicationTag.UNSIGNED_INT: lambda value: Unsigned(int(value)),
    ApplicationTag.SIGNED_INT: lambda value: Integer(int(value)),
    ApplicationTag.REAL: lambda value: Real(float(value)),
    ApplicationTag.DOUBLE: lambda value: Double(float(value)),
    ApplicationTag.ENUMERATED: lambda value: Enumerated(int(value)),
}


class Bacpypes3Adapter:
    def __init__(
        self,
        local_address: str,
        device_id: int = 599,
        device_name: str = "bachome",
        vendor_id: int = 999,
        timeout: float = 5.0,
    ):
        self.local_address = local_address
        self.device_id = device_id
        self.device_name = device_name
        self.vendor_id = vendor_id
        self.timeout = timeout

        self.app: NormalApplication | None = None
        self.connected: bool = False

    # ------------------------------------------------------------------
    # Application lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> bool:
        if not self.app:
            device = DeviceObject(
                objectIdentifier=("device", self.device_id),
                objectName=self.device_name,
                vendorIdentifier=self.vendor_id,
            )
            self.app = NormalApplication(device, Address(self.local_address))

        self.connected = True
        return self.connected

    async def disconnect(self) -> None:
        if self.app:
            self.app.close()
            self.app = None

        self.connected = False

    # ------------------------------------------------------------------
    # Present-value primitives (no semantics)
    # ------------------------------------------------------------------
    async def read_present_value(
        self, address: str, reference: ObjectReference
    ) -> dict[str, Any]:
        """Read present-value; returns {"object", "property", "values": [...]}."""
        if not self.app:
            raise RuntimeError("Application not connected")

        value = await asyncio.wait_for(
            self.app.read_property(
                Address(address), ObjectIdentifier(str(reference)), PRESENT_VALUE
            ),
            timeout=self.timeout,
        )
        return {
            "object": reference.mnemonic,
            "property": PRESENT_VALUE,
            "values": [{"type": type(value).__name__, "value": value}],
        }

    async def write_present_value(
        self,
        address: str,
        reference: ObjectReference,
        value: Any,
        value_type: ApplicationTag | None = None,
        priority: int | None = None,
    ) -> Any:
        if not self.app:
            raise RuntimeError("Application not connected")

        if value_type is not None and value_type not in TAG_ENCODERS:
            raise ValueError(f"Unsupported application tag: {value_type!r}")

        encoded = TAG_ENCODERS[value_type](value) if value_type is not None else value
        await asyncio.wait_for(
            self.app.write_property(
                Address(address),
                ObjectIdentifier(str(reference)),
                PRESENT_VALUE,
                encoded,
                priority=priority,
            ),
            timeout=self.timeout,
        )
        return value

    # ------------------------------------------------------------------
    # Transport-level introspection only
    # ------------------------------------------------------------------
    async def probe(self) -> dict:
        return {
            "transport": "bacnet-ip",
            "local_address": self.local_address,
            "device_id": self.device_id,
            "timeout": self.timeout,
            "connected": self.connected,
        }
