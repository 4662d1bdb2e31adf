# bachome/protocols/bacnet/types.py
"""
BACnet addressing types.

Object references are written in the DZK quick-guide notation
("AV:15" = analog-value 15) and rendered in the "type,instance" form the
BACnet stack accepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ObjectType(Enum):
    """Object types exposed by the DZK interface (value = BACnet name)."""

    ANALOG_INPUT = "analog-input"
    ANALOG_OUTPUT = "analog-output"
    ANALOG_VALUE = "analog-value"
    BINARY_INPUT = "binary-input"
    BINARY_OUTPUT = "binary-output"
    BINARY_VALUE = "binary-value"
    MULTI_STATE_INPUT = "multi-state-input"
    MULTI_STATE_OUTPUT = "multi-state-output"
    MULTI_STATE_VALUE = "multi-state-value"


MNEMONICS: dict[str, ObjectType] = {
    "AI": ObjectType.ANALOG_INPUT,
    "AO": ObjectType.ANALOG_OUTPUT,
    "AV": ObjectType.ANALOG_VALUE,
    "BI": ObjectType.BINARY_INPUT,
    "BO": ObjectType.BINARY_OUTPUT,
    "BV": ObjectType.BINARY_VALUE,
    "MI": ObjectType.MULTI_STATE_INPUT,
    "MO": ObjectType.MULTI_STATE_OUTPUT,
    "MV": ObjectType.MULTI_STATE_VALUE,
}

_TYPE_MNEMONICS = {object_type: key for key, object_type in MNEMONICS.items()}


class ApplicationTag(IntEnum):
    """BACnet application tags used to encode written values."""

    NULL = 0
    BOOLEAN = 1
    UNSIGNED_INT = 2
    SIGNED_INT = 3
    REAL = 4
    DOUBLE = 5
    OCTET_STRING = 6
    CHARACTER_STRING = 7
    BIT_STRING = 8
    ENUMERATED = 9


@dataclass(frozen=True)
class ObjectReference:
    object_type: ObjectType
    instance: int

    @classmethod
    def parse(cls, text: str) -> ObjectReference:
        """Parse "AV:15" notation. Raises ValueError on malformed input."""
        mnemonic, sep, instance = text.strip().partition(":")
        if not sep or mnemonic.upper() not in MNEMONICS:
            raise ValueError(f"Malformed object reference: {text!r}")
        try:
            number = int(instance)
        except ValueError:
            raise ValueError(f"Malformed object instance: {text!r}") from None
        if number < 0:
            raise ValueError(f"Negative object instance: {text!r}")
        return cls(MNEMONICS[mnemonic.upper()], number)

    @property
    def mnemonic(self) -> str:
        return f"{_TYPE_MNEMONICS[self.object_type]}:{self.instance}"

    def __str__(self) -> str:
        return f"{self.object_type.value},{self.instance}"
