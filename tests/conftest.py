# tests/conftest.py
"""Shared pytest fixtures for bridge tests.

Foundation components (directory, protocol wrapper, unit state) are tested
with real instances; only the network is replaced, by FakeBACnetAdapter.
"""

import asyncio
import tempfile
from pathlib import Path
from typing import Any, Generator

import pytest
import yaml

from bachome.devices.dzk.object_directory import ObjectDirectory
from bachome.devices.dzk.unit_state import DzkUnitState
from bachome.observability import logging_system
from bachome.protocols.bacnet.bacnet_protocol import BACnetProtocol
from bachome.protocols.bacnet.types import ApplicationTag, ObjectReference

DZK_ADDRESS = "192.168.1.40"


# ----------------------------------------------------------------
# Fake transport
# ----------------------------------------------------------------
class FakeBACnetAdapter:
    """In-memory stand-in for Bacpypes3Adapter.

    Present values are keyed by quick-guide mnemonic ("AV:15"). Objects
    without a value time out, objects listed in ``failures`` raise the given
    exception, and objects listed in ``gates`` block until the event is set.
    A nonzero ``write_delay`` makes every write suspend before it lands.
    """

    def __init__(self, values: dict[str, Any] | None = None):
        self.values: dict[str, Any] = dict(values or {})
        self.failures: dict[str, BaseException] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.write_delay = 0.0
        self.reads: list[tuple[str, str]] = []
        self.writes: list[tuple[str, str, Any, ApplicationTag | None]] = []
        self.connected = False

    async def connect(self) -> bool:
        self.connected = True
        return True

    async def disconnect(self) -> None:
        self.connected = False

    async def probe(self) -> dict:
        return {"transport": "fake", "connected": self.connected}

    async def read_present_value(self, address: str, reference: ObjectReference):
        key = reference.mnemonic
        self.reads.append((address, key))

        if key in self.gates:
            await self.gates[key].wait()
        if key in self.failures:
            raise self.failures[key]
        if key not in self.values:
            raise asyncio.TimeoutError(f"no response for {key}")

        return {
            "object": key,
            "property": "present-value",
            "values": [{"type": "Real", "value": self.values[key]}],
        }

    async def write_present_value(
        self,
        address: str,
        reference: ObjectReference,
        value: Any,
        value_type: ApplicationTag | None = None,
        priority: int | None = None,
    ):
        key = reference.mnemonic
        self.writes.append((address, key, value, value_type))

        if self.write_delay:
            await asyncio.sleep(self.write_delay)
        if key in self.failures:
            raise self.failures[key]

        self.values[key] = value
        return value


# ----------------------------------------------------------------
# Logging isolation
# ----------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_logger_registry(monkeypatch):
    """Give every test its own loggers (and event trails)."""
    monkeypatch.setattr(logging_system, "_loggers", {})
    monkeypatch.setattr(logging_system, "_default_log_dir", None)


# ----------------------------------------------------------------
# Configuration fixtures
# ----------------------------------------------------------------
@pytest.fixture
def temp_config_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test configuration files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def write_config_file(temp_config_dir):
    """Factory fixture for writing YAML configuration files."""

    def _write_config(config: dict, filename: str = "dzk.yml") -> Path:
        config_file = temp_config_dir / filename
        with open(config_file, "w") as f:
            yaml.dump(config, f)
        return config_file

    return _write_config


@pytest.fixture
def dzk_config() -> dict:
    """Normalised dzk section as produced by ConfigLoader."""
    from bachome.devices.dzk.characteristics import TemperatureUnit

    return {
        "address": DZK_ADDRESS,
        "device_units": TemperatureUnit.FAHRENHEIT,
        "timeout": 5.0,
        "local_address": "0.0.0.0",
        "device_id": 599,
        "device_name": "bachome",
        "zones": [
            {"zone": 1, "name": "Living room"},
            {"zone": 2, "name": "Bedroom"},
        ],
    }


# ----------------------------------------------------------------
# DZK fixtures
# ----------------------------------------------------------------
@pytest.fixture(scope="session")
def directory() -> ObjectDirectory:
    """The bundled DZK object directory."""
    return ObjectDirectory.load()


@pytest.fixture
def fake_adapter() -> FakeBACnetAdapter:
    return FakeBACnetAdapter()


@pytest.fixture
def protocol(fake_adapter) -> BACnetProtocol:
    return BACnetProtocol(fake_adapter)


@pytest.fixture
def unit_state(protocol, directory) -> DzkUnitState:
    return DzkUnitState(protocol, directory, address=DZK_ADDRESS)
