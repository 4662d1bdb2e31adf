#!/usr/bin/env python3
"""
Monitor (and poke) the zones of a DZK unit from the command line.

Usage:
    python tools/zone_monitor.py                      # poll every 10 s
    python tools/zone_monitor.py --once               # one refresh, print, exit
    python tools/zone_monitor.py --once --json        # machine-readable snapshot
    python tools/zone_monitor.py --zone 2 --off       # switch zone 2 off
    python tools/zone_monitor.py --zone 1 --target 21.5 --mode heat

Reads config/dzk.yml and config/logging.yml (see bachome.config).
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bachome.devices.dzk.characteristics import (
    CurrentHeatingCoolingState,
    TargetHeatingCoolingState,
    TemperatureDisplayUnits,
    c2f,
)
from bachome.exceptions import BachomeError
from bachome.platform import BachomePlatform

MODES = {state.name.lower(): state for state in TargetHeatingCoolingState}


def format_temperature(celsius: float, units: int) -> str:
    if units == TemperatureDisplayUnits.FAHRENHEIT:
        return f"{c2f(celsius):5.1f}°F"
    return f"{celsius:5.1f}°C"


def print_snapshot(snapshot: dict) -> None:
    print(f"DZK at {snapshot['address']}  mode: {snapshot['operation_mode'] or 'unknown'}")
    print()
    print(
        f"{'Zone':<5} {'Name':<20} {'On':<4} {'State':<6} {'Target':<6} "
        f"{'Temp':>8} {'Setpoint':>8} {'Heat':>8} {'Cool':>8} {'RH':>6} {'Fan':<4}"
    )
    print("-" * 96)
    for zone, values in snapshot["zones"].items():
        units = values["temperature_display_units"]
        print(
            f"{zone:<5} {values['name'][:20]:<20} "
            f"{'yes' if values['zone_on'] else 'no':<4} "
            f"{CurrentHeatingCoolingState(values['current_heating_cooling_state']).name:<6} "
            f"{TargetHeatingCoolingState(values['target_heating_cooling_state']).name:<6} "
            f"{format_temperature(values['current_temperature'], units):>8} "
            f"{format_temperature(values['target_temperature'], units):>8} "
            f"{format_temperature(values['heating_threshold_temperature'], units):>8} "
            f"{format_temperature(values['cooling_threshold_temperature'], units):>8} "
            f"{values['current_relative_humidity']:5.1f}% "
            f"{'on' if values['current_fan_state'] else 'off':<4}"
        )
    print()


async def apply_commands(platform: BachomePlatform, args) -> int:
    """Issue the requested writes; returns the number issued."""
    if args.zone is None:
        return 0

    accessory = platform.accessories.get(args.zone)
    if accessory is None:
        print(f"Zone not configured: {args.zone}")
        print(f"Available: {', '.join(str(z) for z in platform.accessories)}")
        return -1

    issued = 0
    if args.on or args.off:
        accessory.set_zone_on(bool(args.on))
        issued += 1
    if args.mode:
        accessory.set_target_heating_cooling_state(MODES[args.mode])
        issued += 1
        # the target setpoint is chosen from the unit mode, so it must land first
        await accessory.settle()
    if args.target is not None:
        accessory.set_target_temperature(args.target)
        issued += 1

    await accessory.settle()
    return issued


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monitor the zones of a Daikin DZK BACnet interface",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python tools/zone_monitor.py --once
  python tools/zone_monitor.py --interval 30
  python tools/zone_monitor.py --zone 3 --mode cool --target 24
        """,
    )
    parser.add_argument("--config", default="config", help="Configuration directory")
    parser.add_argument(
        "--once", action="store_true", help="Refresh once, print and exit"
    )
    parser.add_argument(
        "--interval", type=float, default=10.0, help="Seconds between refreshes"
    )
    parser.add_argument("--json", action="store_true", help="Print snapshots as JSON")
    parser.add_argument("--zone", type=int, help="Zone to send commands to")

    power = parser.add_mutually_exclusive_group()
    power.add_argument("--on", action="store_true", help="Switch the zone on")
    power.add_argument("--off", action="store_true", help="Switch the zone off")

    parser.add_argument("--mode", choices=sorted(MODES), help="Set the unit operation mode")
    parser.add_argument("--target", type=float, help="Set the zone target temperature (°C)")
    return parser


def parse_args(argv=None) -> argparse.Namespace:
    parser = create_parser()
    args = parser.parse_args(argv)

    commands = args.on or args.off or args.mode or args.target is not None
    if commands and args.zone is None:
        parser.error("--on/--off/--mode/--target require --zone")
    return args


async def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    try:
        platform = BachomePlatform.from_config_dir(args.config)
    except BachomeError as err:
        print(f"Configuration error: {err}")
        return 1

    await platform.start()
    try:
        if await apply_commands(platform, args) < 0:
            return 1

        while True:
            for accessory in platform.accessories.values():
                accessory.refresh_all()
            await platform.settle()

            # second pass picks up the target temperature for the refreshed mode
            for accessory in platform.accessories.values():
                accessory.get_target_temperature()
            await platform.settle()

            snapshot = platform.snapshot()
            if args.json:
                print(json.dumps(snapshot, indent=2, default=str))
            else:
                print_snapshot(snapshot)

            if args.once:
                return 0
            await asyncio.sleep(args.interval)
    finally:
        await platform.stop()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
