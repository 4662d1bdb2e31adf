"""
BACnet bridge for Daikin DZK multi-zone HVAC interfaces.

Structure:
    bachome/
    ├── protocols/bacnet/     # Present-value transport (bacpypes3 adapter)
    ├── devices/dzk/          # Object directory, zone controller, refresh bridge
    ├── config/               # YAML configuration loader
    ├── observability/        # Structured logging
    └── platform.py           # Two-phase startup of all configured zones
"""

__version__ = "0.3.0"
