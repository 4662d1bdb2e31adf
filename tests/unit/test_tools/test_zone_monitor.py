# tests/unit/test_tools/test_zone_monitor.py
"""
Unit tests for the zone monitor CLI.

Runs argument handling and command application against a real platform
backed by the in-memory BACnet adapter.
"""

import pytest
import pytest_asyncio

from bachome.devices.dzk.characteristics import DzkOperationMode
from bachome.platform import BachomePlatform
from tools.zone_monitor import apply_commands, parse_args


# ================================================================
# FIXTURES
# ================================================================
@pytest_asyncio.fixture
async def platform(dzk_config, fake_adapter, directory):
    fake_adapter.values["MO:0"] = DzkOperationMode.COOL
    bridge = BachomePlatform(dzk_config, adapter=fake_adapter, directory=directory)
    await bridge.start()
    fake_adapter.writes.clear()
    return bridge


# ================================================================
# PARSER TESTS
# ================================================================
class TestParseArgs:
    """Test command-line validation."""

    def test_monitor_only(self):
        args = parse_args(["--once", "--json"])

        assert args.once is True
        assert args.zone is None

    def test_commands_with_zone(self):
        args = parse_args(["--zone", "2", "--off", "--mode", "heat", "--target", "21.5"])

        assert args.zone == 2
        assert args.off is True
        assert args.mode == "heat"
        assert args.target == 21.5

    @pytest.mark.parametrize(
        "argv",
        [["--on"], ["--off"], ["--mode", "cool"], ["--target", "20"]],
    )
    def test_commands_without_zone_rejected(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(argv)

        assert exc_info.value.code == 2
        assert "require --zone" in capsys.readouterr().err

    def test_on_and_off_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["--zone", "1", "--on", "--off"])


# ================================================================
# COMMAND TESTS
# ================================================================
class TestApplyCommands:
    """Test writes issued for --zone commands."""

    @pytest.mark.asyncio
    async def test_no_zone_issues_nothing(self, platform, fake_adapter):
        assert await apply_commands(platform, parse_args(["--once"])) == 0
        assert fake_adapter.writes == []

    @pytest.mark.asyncio
    async def test_unknown_zone(self, platform, fake_adapter, capsys):
        assert await apply_commands(platform, parse_args(["--zone", "5", "--on"])) == -1
        assert fake_adapter.writes == []
        assert "Zone not configured: 5" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_mode_lands_before_target_setpoint(self, platform, fake_adapter):
        """Switching COOL -> HEAT with a target writes the heat set point."""
        fake_adapter.write_delay = 0.01
        args = parse_args(["--zone", "1", "--mode", "heat", "--target", "21.5"])

        issued = await apply_commands(platform, args)

        assert issued == 2
        assert [key for _, key, _, _ in fake_adapter.writes] == ["MO:0", "AV:1"]
        assert int(fake_adapter.values["MO:0"]) == DzkOperationMode.HEAT
        assert fake_adapter.values["AV:1"] == pytest.approx(70.7)
        assert platform.unit.operation_mode is DzkOperationMode.HEAT

    @pytest.mark.asyncio
    async def test_zone_off(self, platform, fake_adapter):
        issued = await apply_commands(platform, parse_args(["--zone", "2", "--off"]))

        assert issued == 1
        assert [(key, value) for _, key, value, _ in fake_adapter.writes] == [("BV:7", 0)]
