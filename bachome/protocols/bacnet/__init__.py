"""BACnet present-value transport."""

from bachome.protocols.bacnet.bacnet_protocol import BACnetProtocol
from bachome.protocols.bacnet.types import ApplicationTag, ObjectReference, ObjectType

__all__ = [
    "ApplicationTag",
    "BACnetProtocol",
    "ObjectReference",
    "ObjectType",
]
