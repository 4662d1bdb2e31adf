"""
Daikin DZK-BACNET-3 multi-zone interface.

Structure:
    object_directory.py   Semantic key -> BACnet object table (dzk_objects.yml)
    characteristics.py    HomeKit/DZK enumerations, unit and mode conversion
    unit_state.py         Address + operation mode shared by all zones
    zone_controller.py    Per-zone reads/writes and set point arbitration
    zone_accessory.py     Non-blocking cached getters/setters over a controller
"""

from bachome.devices.dzk.object_directory import ObjectDirectory
from bachome.devices.dzk.unit_state import DzkUnitState
from bachome.devices.dzk.zone_accessory import DzkZoneAccessory
from bachome.devices.dzk.zone_controller import DzkZoneController, ZoneState

__all__ = [
    "DzkUnitState",
    "DzkZoneAccessory",
    "DzkZoneController",
    "ObjectDirectory",
    "ZoneState",
]
