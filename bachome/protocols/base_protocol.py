# bachome/protocols/base_protocol.py
"""
Base class for protocol wrappers.

A protocol wraps a library adapter and owns the connection flag; the adapter
does the I/O.
"""

from abc import ABC, abstractmethod


class BaseProtocol(ABC):
    def __init__(self, protocol_name: str):
        self.protocol_name = protocol_name
        self.connected = False

    @abstractmethod
    async def connect(self) -> bool: ...

    @abstractmethod
    async def disconnect(self) -> None: ...

    async def probe(self) -> dict[str, object]:
        return {
            "protocol": self.protocol_name,
            "connected": self.connected,
        }
