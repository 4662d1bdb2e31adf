# tests/unit/protocols/test_bacpypes3_adapter.py
"""
Unit tests for Bacpypes3Adapter.

The bacpypes3 application is mocked; addresses, identifiers and encoded
primitives are real bacpypes3 objects.
"""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest
from bacpypes3.primitivedata import Enumerated, ObjectIdentifier, Real, Unsigned

from bachome.protocols.bacnet.bacpypes3_adapter import Bacpypes3Adapter
from bachome.protocols.bacnet.types import ApplicationTag, ObjectReference


# ================================================================
# FIXTURES
# ================================================================
@pytest.fixture
def adapter():
    return Bacpypes3Adapter(local_address="192.168.1.10/24", timeout=0.5)


@pytest.fixture
def mock_app():
    app = Mock()
    app.read_property = AsyncMock()
    app.write_property = AsyncMock()
    app.close = Mock()
    return app


@pytest.fixture
def connected_adapter(adapter, mock_app):
    adapter.app = mock_app
    adapter.connected = True
    return adapter


# ================================================================
# INITIALIZATION / LIFECYCLE TESTS
# ================================================================
class TestBacpypes3AdapterLifecycle:
    """Test application creation and teardown."""

    def test_uses_ipv4_normal_application(self):
        from bacpypes3.ipv4.app import NormalApplication

        from bachome.protocols.bacnet import bacpypes3_adapter

        assert bacpypes3_adapter.NormalApplication is NormalApplication

    def test_init_defaults(self, adapter):
        assert adapter.local_address == "192.168.1.10/24"
        assert adapter.device_id == 599
        assert adapter.app is None
        assert adapter.connected is False

    @pytest.mark.asyncio
    @patch("bachome.protocols.bacnet.bacpypes3_adapter.DeviceObject")
    @patch("bachome.protocols.bacnet.bacpypes3_adapter.NormalApplication")
    async def test_connect_creates_application(
        self, mock_app_class, mock_device_class, adapter
    ):
        result = await adapter.connect()

        assert result is True
        assert adapter.connected is True
        assert adapter.app == mock_app_class.return_value
        mock_device_class.assert_called_once_with(
            objectIdentifier=("device", 599),
            objectName="bachome",
            vendorIdentifier=999,
        )
        mock_app_class.assert_called_once()

    @pytest.mark.asyncio
    @patch("bachome.protocols.bacnet.bacpypes3_adapter.DeviceObject")
    @patch("bachome.protocols.bacnet.bacpypes3_adapter.NormalApplication")
    async def test_connect_reuses_application(
        self, mock_app_class, mock_device_class, adapter
    ):
        await adapter.connect()
        await adapter.connect()

        mock_app_class.assert_called_once()

    @pytest.mark.asyncio
    async def test_disconnect_closes_application(self, connected_adapter, mock_app):
        await connected_adapter.disconnect()

        mock_app.close.assert_called_once()
        assert connected_adapter.app is None
        assert connected_adapter.connected is False

    @pytest.mark.asyncio
    async def test_probe(self, adapter):
        result = await adapter.probe()

        assert result["transport"] == "bacnet-ip"
        assert result["connected"] is False


# ================================================================
# READ TESTS
# ================================================================
class TestBacpypes3AdapterRead:
    """Test present-value reads."""

    @pytest.mark.asyncio
    async def test_read_not_connected(self, adapter):
        with pytest.raises(RuntimeError, match="not connected"):
            await adapter.read_present_value("192.168.1.40", ObjectReference.parse("AI:0"))

    @pytest.mark.asyncio
    async def test_read_returns_value_record(self, connected_adapter, mock_app):
        mock_app.read_property.return_value = 71.5

        result = await connected_adapter.read_present_value(
            "192.168.1.40", ObjectReference.parse("AI:0")
        )

        assert result == {
            "object": "AI:0",
            "property": "present-value",
            "values": [{"type": "float", "value": 71.5}],
        }
        address, objid, prop = mock_app.read_property.await_args.args
        assert str(address) == "192.168.1.40"
        assert objid == ObjectIdentifier("analog-input,0")
        assert prop == "present-value"

    @pytest.mark.asyncio
    async def test_read_timeout(self, connected_adapter, mock_app):
        async def never_answers(*args, **kwargs):
            await asyncio.sleep(10)

        mock_app.read_property.side_effect = never_answers

        with pytest.raises(asyncio.TimeoutError):
            await connected_adapter.read_present_value(
                "192.168.1.40", ObjectReference.parse("AI:0")
            )


# ================================================================
# WRITE TESTS
# ================================================================
class TestBacpypes3AdapterWrite:
    """Test present-value writes and value encoding."""

    @pytest.mark.asyncio
    async def test_write_not_connected(self, adapter):
        with pytest.raises(RuntimeError):
            await adapter.write_present_value(
                "192.168.1.40", ObjectReference.parse("AV:1"), 70.0
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "tag, value, primitive",
        [
            (ApplicationTag.REAL, 70.7, Real),
            (ApplicationTag.UNSIGNED_INT, 3, Unsigned),
            (ApplicationTag.ENUMERATED, 1, Enumerated),
        ],
    )
    async def test_write_encodes_by_tag(
        self, connected_adapter, mock_app, tag, value, primitive
    ):
        result = await connected_adapter.write_present_value(
            "192.168.1.40", ObjectReference.parse("AV:1"), value, value_type=tag
        )

        assert result == value
        args = mock_app.write_property.await_args.args
        assert args[2] == "present-value"
        assert isinstance(args[3], primitive)
        assert mock_app.write_property.await_args.kwargs == {"priority": None}

    @pytest.mark.asyncio
    async def test_write_untagged_value_passed_through(self, connected_adapter, mock_app):
        await connected_adapter.write_present_value(
            "192.168.1.40", ObjectReference.parse("MO:0"), 3
        )

        assert mock_app.write_property.await_args.args[3] == 3

    @pytest.mark.asyncio
    async def test_write_unsupported_tag(self, connected_adapter, mock_app):
        with pytest.raises(ValueError, match="Unsupported"):
            await connected_adapter.write_present_value(
                "192.168.1.40",
                ObjectReference.parse("AV:1"),
                "x",
                value_type=ApplicationTag.CHARACTER_STRING,
            )

        mock_app.write_property.assert_not_awaited()
