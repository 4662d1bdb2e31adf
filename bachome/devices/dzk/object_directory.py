# bachome/devices/dzk/object_directory.py
"""
Static object directory for the DZK-BACNET-3 interface.

Maps semantic keys ("heating-demand" in zone 3, "dzk-operation-mode" in the
global scope) to BACnet object references. The table is loaded once from
``dzk_objects.yml`` and validated at load time; there are no dynamic entries.

Scopes:
  "global"         device-wide objects
  "zone1".."zone6" per-zone objects (an int 1..6 is accepted as shorthand)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import yaml

from bachome.exceptions import AccessDeniedError, UnknownObjectError
from bachome.protocols.bacnet.types import ObjectReference

GLOBAL_SCOPE = "global"
ZONE_NUMBERS = range(1, 7)

DEFAULT_DIRECTORY_FILE = Path(__file__).with_name("dzk_objects.yml")

# Keys every zone scope must carry
REQUIRED_ZONE_KEYS = (
    "onoff",
    "local-ventilation",
    "room-temperature",
    "heat-set-point",
    "cold-set-point",
    "humidity",
    "cooling-demand",
    "heating-demand",
)

REQUIRED_GLOBAL_KEYS = (
    "dzk-operation-mode",
    "dzk-global-fan",
)


class Access(Enum):
    READ_ONLY = "R"
    READ_WRITE = "R/W"

    @classmethod
    def parse(cls, text: str) -> Access:
        # the quick guide has stray whitespace in a few rows (" R/W")
        return cls(text.replace(" ", "").upper())


@dataclass(frozen=True)
class DirectoryEntry:
    key: str
    reference: ObjectReference
    description: str
    access: Access

    @property
    def writable(self) -> bool:
        return self.access is Access.READ_WRITE


def zone_scope(zone: int) -> str:
    return f"zone{zone}"


def normalise_scope(scope: str | int) -> str:
    if isinstance(scope, bool):
        raise UnknownObjectError(f"Unknown directory scope: {scope!r}")
    if isinstance(scope, int):
        return zone_scope(scope)
    return scope


class ObjectDirectory:
    """
    Immutable map of maps: scope -> key -> DirectoryEntry.

    Example:
        >>> directory = ObjectDirectory.load()
        >>> directory.lookup(1, "room-temperature").reference.mnemonic
        'AI:0'
    """

    def __init__(self, scopes: Mapping[str, Mapping[str, DirectoryEntry]]):
        self._scopes = MappingProxyType(
            {name: MappingProxyType(dict(entries)) for name, entries in scopes.items()}
        )
        self.validate()

    @classmethod
    def load(cls, path: Path | str = DEFAULT_DIRECTORY_FILE) -> ObjectDirectory:
        """Load and validate a directory from a YAML object list."""
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> ObjectDirectory:
        scopes: dict[str, dict[str, DirectoryEntry]] = {}
        for scope, entries in raw.items():
            if not isinstance(entries, Mapping):
                raise ValueError(f"Directory scope {scope!r} is not a mapping")
            scopes[scope] = {}
            for key, item in entries.items():
                try:
                    scopes[scope][key] = DirectoryEntry(
                        key=key,
                        reference=ObjectReference.parse(item["object"]),
                        description=item.get("description", ""),
                        access=Access.parse(item.get("access", "R")),
                    )
                except (KeyError, TypeError, ValueError) as err:
                    raise ValueError(
                        f"Invalid directory entry {scope}.{key}: {err}"
                    ) from err
        return cls(scopes)

    def validate(self) -> None:
        """Fail fast if any scope or required key is missing."""
        missing: list[str] = []

        if GLOBAL_SCOPE not in self._scopes:
            missing.append(GLOBAL_SCOPE)
        else:
            missing.extend(
                f"{GLOBAL_SCOPE}.{key}"
                for key in REQUIRED_GLOBAL_KEYS
                if key not in self._scopes[GLOBAL_SCOPE]
            )

        for zone in ZONE_NUMBERS:
            scope = zone_scope(zone)
            if scope not in self._scopes:
                missing.append(scope)
                continue
            missing.extend(
                f"{scope}.{key}"
                for key in REQUIRED_ZONE_KEYS
                if key not in self._scopes[scope]
            )

        if missing:
            raise ValueError(f"Object directory incomplete, missing: {', '.join(missing)}")

    # ----------------------------------------------------------------
    # Lookup
    # ----------------------------------------------------------------

    @property
    def scopes(self) -> list[str]:
        return list(self._scopes)

    def has_scope(self, scope: str | int) -> bool:
        try:
            return normalise_scope(scope) in self._scopes
        except UnknownObjectError:
            return False

    def entries(self, scope: str | int) -> Mapping[str, DirectoryEntry]:
        name = normalise_scope(scope)
        try:
            return self._scopes[name]
        except KeyError:
            raise UnknownObjectError(f"Unknown directory scope: {scope!r}") from None

    def lookup(self, scope: str | int, key: str) -> DirectoryEntry:
        entries = self.entries(scope)
        try:
            return entries[key]
        except (KeyError, TypeError):
            raise UnknownObjectError(
                f"No object {key!r} in directory scope {normalise_scope(scope)!r}"
            ) from None

    def lookup_writable(self, scope: str | int, key: str) -> DirectoryEntry:
        return require_writable(self.lookup(scope, key))


def require_writable(entry: DirectoryEntry) -> DirectoryEntry:
    if not entry.writable:
        raise AccessDeniedError(
            f"{entry.key} ({entry.reference.mnemonic}) is read-only"
        )
    return entry
