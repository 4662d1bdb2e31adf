# bachome/config/config_loader.py
"""
Config loader for the bridge's YAML configuration files.

Files (all under config_dir):
  dzk.yml       DZK unit and zone accessories (created with defaults if absent)
  logging.yml   Log directory and level (optional)
"""

from pathlib import Path
from typing import Any

import yaml

from bachome.devices.dzk.characteristics import TemperatureUnit
from bachome.exceptions import ConfigurationError
from bachome.observability.logging_system import EventCategory, get_logger

DZK_SECTION = "dzk-bacnet"

DEVICE_DEFAULTS = {
    "device_units": TemperatureUnit.FAHRENHEIT.value,
    "timeout": 5.0,
    "local_address": "0.0.0.0",
    "device_id": 599,
    "device_name": "bachome",
}

LOGGING_DEFAULTS = {
    "log_dir": None,
    "level": "INFO",
    "json": False,
}

logger = get_logger(__name__, device="config")

CONFIG_EVENT = {"category": EventCategory.CONFIGURATION}


class ConfigLoader:
    """Loads and validates the bridge configuration files."""

    def __init__(self, config_dir="config"):
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

    def load_all(self) -> dict[str, Any]:
        """Load every configuration file; returns {"dzk": ..., "logging": ...}."""
        return {
            "dzk": self.load_dzk(),
            "logging": self.load_logging(),
        }

    # ----------------------------------------------------------------
    # dzk.yml
    # ----------------------------------------------------------------

    def load_dzk(self) -> dict[str, Any]:
        dzk_path = self.config_dir / "dzk.yml"
        if dzk_path.exists():
            raw = self._read_yaml(dzk_path)
            section = raw.get(DZK_SECTION)
            if not isinstance(section, dict):
                raise ConfigurationError(f"{dzk_path}: missing '{DZK_SECTION}' section")
        else:
            section = self._create_default_dzk()
            self._save_dzk(section)

        return self._normalise_dzk(section, dzk_path)

    def _normalise_dzk(self, section: dict[str, Any], source: Path) -> dict[str, Any]:
        config = dict(DEVICE_DEFAULTS)
        config.update({k: v for k, v in section.items() if k not in ("zones", "ipAddress")})

        # "ipAddress" is accepted for configs written for the homebridge plugin
        address = section.get("address") or section.get("ipAddress")
        if not address:
            raise ConfigurationError(f"{source}: '{DZK_SECTION}.address' is required")
        config["address"] = str(address)

        try:
            config["device_units"] = TemperatureUnit.parse(str(config["device_units"]))
        except ValueError as err:
            raise ConfigurationError(f"{source}: {err}") from err

        try:
            config["timeout"] = float(config["timeout"])
            config["device_id"] = int(config["device_id"])
        except (TypeError, ValueError) as err:
            raise ConfigurationError(f"{source}: invalid number: {err}") from err
        if config["timeout"] <= 0:
            raise ConfigurationError(f"{source}: timeout must be positive")

        config["zones"] = self._normalise_zones(section.get("zones") or [], source)
        logger.info(
            f"Loaded DZK config from {source}: {config['address']}, "
            f"{len(config['zones'])} zone(s)",
            extra=CONFIG_EVENT,
        )
        return config

    def _normalise_zones(self, zones: Any, source: Path) -> list[dict[str, Any]]:
        if not isinstance(zones, list):
            raise ConfigurationError(f"{source}: 'zones' must be a list")

        result = []
        for index, entry in enumerate(zones):
            if not isinstance(entry, dict) or "zone" not in entry:
                raise ConfigurationError(
                    f"{source}: zones[{index}] has no 'zone' number"
                )
            zone = entry["zone"]
            if isinstance(zone, bool) or not isinstance(zone, int):
                raise ConfigurationError(
                    f"{source}: zones[{index}].zone must be an integer, got {zone!r}"
                )
            result.append({"zone": zone, "name": str(entry.get("name") or f"Zone {zone}")})
        return result

    def _create_default_dzk(self) -> dict[str, Any]:
        """Create default DZK configuration."""
        return {
            "address": "192.168.1.40",
            "device_units": TemperatureUnit.FAHRENHEIT.value,
            "timeout": 5.0,
            "local_address": "0.0.0.0",
            "device_id": 599,
            "device_name": "bachome",
            "zones": [
                {"name": "Zone 1", "zone": 1},
            ],
        }

    def _save_dzk(self, section: dict[str, Any]) -> None:
        dzk_path = self.config_dir / "dzk.yml"
        with open(dzk_path, "w") as f:
            yaml.dump({DZK_SECTION: section}, f, default_flow_style=False)
        logger.info(f"Created default DZK config at {dzk_path}", extra=CONFIG_EVENT)

    # ----------------------------------------------------------------
    # logging.yml
    # ----------------------------------------------------------------

    def load_logging(self) -> dict[str, Any]:
        config = dict(LOGGING_DEFAULTS)

        logging_path = self.config_dir / "logging.yml"
        if logging_path.exists():
            raw = self._read_yaml(logging_path)
            config.update(raw.get("logging") or {})

        config["json"] = bool(config["json"])
        return config

    # ----------------------------------------------------------------
    # helpers
    # ----------------------------------------------------------------

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as err:
            raise ConfigurationError(f"{path}: invalid YAML: {err}") from err

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path}: top level must be a mapping")
        return data
