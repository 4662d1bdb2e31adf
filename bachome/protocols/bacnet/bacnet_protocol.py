# bachome/protocols/bacnet/bacnet_protocol.py
"""
BACnet present-value transport.

Library-agnostic: every adapter failure (timeout, reject/abort, socket error,
adapter not connected) surfaces as TransportError with the original exception
attached as ``cause``. No retries; retry policy belongs to the caller.
"""

from typing import Any

from bachome.exceptions import TransportError
from bachome.protocols.base_protocol import BaseProtocol
from bachome.protocols.bacnet.types import ApplicationTag, ObjectReference


class BACnetProtocol(BaseProtocol):
    def __init__(self, adapter):
        super().__init__("bacnet")
        self.adapter = adapter

    # ------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------

    async def connect(self) -> bool:
        self.connected = await self.adapter.connect()
        return self.connected

    async def disconnect(self) -> None:
        await self.adapter.disconnect()
        self.connected = False

    async def probe(self) -> dict[str, object]:
        result = await super().probe()
        result["adapter"] = await self.adapter.probe()
        return result

    # ------------------------------------------------------------
    # present value
    # ------------------------------------------------------------

    async def read_present_value(self, address: str, reference: ObjectReference) -> Any:
        try:
            response = await self.adapter.read_present_value(address, reference)
        except Exception as err:
            raise TransportError(
                f"read {reference.mnemonic} from {address} failed: {err!r}", cause=err
            ) from err

        try:
            return response["values"][0]["value"]
        except (KeyError, IndexError, TypeError) as err:
            raise TransportError(
                f"read {reference.mnemonic} from {address}: malformed response {response!r}",
                cause=err,
            ) from err

    async def write_present_value(
        self,
        address: str,
        reference: ObjectReference,
        value: Any,
        value_type: ApplicationTag | None = None,
    ) -> Any:
        """Write present-value; returns the value accepted by the device."""
        try:
            return await self.adapter.write_present_value(
                address, reference, value, value_type=value_type
            )
        except Exception as err:
            raise TransportError(
                f"write {value!r} to {reference.mnemonic} at {address} failed: {err!r}",
                cause=err,
            ) from err
