# tests/unit/devices/test_unit_state.py
"""
Unit tests for DzkUnitState (address + operation mode shared by all zones).
"""

import pytest

from bachome.devices.dzk.characteristics import DzkOperationMode
from bachome.devices.dzk.unit_state import DzkUnitState
from bachome.exceptions import AccessDeniedError, TransportError, UnknownObjectError
from bachome.protocols.bacnet.types import ApplicationTag


# ================================================================
# ADDRESS TESTS
# ================================================================
class TestUnitAddress:
    """Test the set-once device address."""

    def test_address_from_constructor(self, unit_state):
        assert unit_state.address == "192.168.1.40"
        assert unit_state.operation_mode is None

    def test_address_is_set_once(self, protocol, directory):
        unit = DzkUnitState(protocol, directory)

        assert unit.set_address("10.0.0.5") is True
        assert unit.set_address("10.0.0.6") is False
        assert unit.address == "10.0.0.5"


# ================================================================
# OPERATION MODE TESTS
# ================================================================
class TestOperationMode:
    """Test fetching and writing the global operation mode."""

    @pytest.mark.asyncio
    async def test_fetch_updates_cache(self, unit_state, fake_adapter):
        fake_adapter.values["MO:0"] = 3

        mode = await unit_state.fetch_operation_mode()

        assert mode is DzkOperationMode.HEAT
        assert unit_state.operation_mode is DzkOperationMode.HEAT
        assert fake_adapter.reads == [("192.168.1.40", "MO:0")]

    @pytest.mark.asyncio
    async def test_fetch_unknown_value_clears_cache(self, unit_state, fake_adapter):
        unit_state.operation_mode = DzkOperationMode.COOL
        fake_adapter.values["MO:0"] = 9

        assert await unit_state.fetch_operation_mode() is None
        assert unit_state.operation_mode is None

    @pytest.mark.asyncio
    async def test_fetch_failure_leaves_cache(self, unit_state, fake_adapter):
        unit_state.operation_mode = DzkOperationMode.COOL

        with pytest.raises(TransportError):
            await unit_state.fetch_operation_mode()

        assert unit_state.operation_mode is DzkOperationMode.COOL

    @pytest.mark.asyncio
    async def test_write_mode(self, unit_state, fake_adapter):
        mode = await unit_state.write_operation_mode(DzkOperationMode.COOL)

        assert mode is DzkOperationMode.COOL
        assert unit_state.operation_mode is DzkOperationMode.COOL
        assert fake_adapter.writes == [
            ("192.168.1.40", "MO:0", 2, ApplicationTag.UNSIGNED_INT)
        ]

    @pytest.mark.asyncio
    async def test_write_failure_leaves_cache(self, unit_state, fake_adapter):
        fake_adapter.failures["MO:0"] = OSError("unreachable")

        with pytest.raises(TransportError):
            await unit_state.write_operation_mode(DzkOperationMode.HEAT)

        assert unit_state.operation_mode is None


# ================================================================
# GLOBAL OBJECT TESTS
# ================================================================
class TestGlobalObjects:
    """Test global-scope reads and writes."""

    @pytest.mark.asyncio
    async def test_read_global(self, unit_state, fake_adapter):
        fake_adapter.values["BV:0"] = 1

        assert await unit_state.read_global("dzk-global-fan") == 1

    @pytest.mark.asyncio
    async def test_write_read_only_global_is_denied(self, unit_state, fake_adapter):
        with pytest.raises(AccessDeniedError):
            await unit_state.write_global("dzk-global-fan", 1)

        assert fake_adapter.writes == []

    @pytest.mark.asyncio
    async def test_unknown_global_key(self, unit_state):
        with pytest.raises(UnknownObjectError):
            await unit_state.read_global("no-such-object")
