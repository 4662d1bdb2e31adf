# bachome/observability/logging_system.py
"""
Structured logging for the DZK bridge.

Provides:
- Console and rotating JSON file output
- Event classification (severity + category)
- A bounded in-memory event trail for communication and audit events

The event trail is what lets the host (and the tests) see transport failures
that were swallowed by the refresh bridge: every failure is still logged, but
never raised back to the characteristic layer.
"""

import asyncio
import json
import logging
import logging.handlers
import threading
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "EventSeverity",
    "EventCategory",
    "LogEntry",
    "ConsoleFormatter",
    "JSONFormatter",
    "BridgeLogger",
    "configure_logging",
    "get_logger",
]


# ----------------------------------------------------------------
# Event classification
# ----------------------------------------------------------------


class EventSeverity(Enum):
    """
    Event severity levels (aligned with IEC 62443).

    Lower number = more severe.
    """

    CRITICAL = 1
    ALERT = 2
    ERROR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7

    @property
    def logging_level(self) -> int:
        return _SEVERITY_LEVELS[self]

    @classmethod
    def from_logging_level(cls, levelno: int) -> "EventSeverity":
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARNING
        if levelno >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_SEVERITY_LEVELS = {
    EventSeverity.CRITICAL: logging.CRITICAL,
    EventSeverity.ALERT: logging.CRITICAL,
    EventSeverity.ERROR: logging.ERROR,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.NOTICE: logging.INFO,
    EventSeverity.INFO: logging.INFO,
    EventSeverity.DEBUG: logging.DEBUG,
}


class EventCategory(Enum):
    """Bridge event categories."""

    COMMUNICATION = "communication"  # BACnet read/write outcomes
    DEVICE = "device"  # Zone/unit state changes
    CONFIGURATION = "configuration"  # Config loading and validation
    SYSTEM = "system"  # Startup/shutdown
    AUDIT = "audit"  # Commands issued to the unit


# retained in the in-memory trail
TRAIL_CATEGORIES = frozenset({EventCategory.COMMUNICATION, EventCategory.AUDIT})


# ----------------------------------------------------------------
# Structured log entry
# ----------------------------------------------------------------


@dataclass
class LogEntry:
    """One classified bridge event."""

    wall_time: float
    severity: EventSeverity
    category: EventCategory
    message: str

    device: str = ""  # "zone3", "dzk-unit", ...
    component: str = ""  # logger name
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "event_id": self.event_id,
            "wall_time": self.wall_time,
            "severity": self.severity.name,
            "category": self.category.value,
            "message": self.message,
        }
        for key in ("device", "component"):
            if getattr(self, key):
                result[key] = getattr(self, key)
        if self.data:
            result["data"] = json.dumps(self.data, default=str)
        return result

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_human_readable(self) -> str:
        context = ":".join(part for part in (self.device, self.component) if part)
        prefix = f"[{self.severity.name:<8}]"
        if context:
            prefix = f"{prefix} {context}:"
        return f"{prefix} {self.message}"


# ----------------------------------------------------------------
# Formatters
# ----------------------------------------------------------------


class ConsoleFormatter(logging.Formatter):
    """Plain console format; records carry the device via BridgeLogger."""

    def __init__(self):
        super().__init__(fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s")


class JSONFormatter(logging.Formatter):
    """One JSON LogEntry per line."""

    def __init__(self, device: str = ""):
        super().__init__()
        self.device = device

    def format(self, record: logging.LogRecord) -> str:
        entry = LogEntry(
            wall_time=record.created,
            severity=EventSeverity.from_logging_level(record.levelno),
            category=getattr(record, "category", EventCategory.SYSTEM),
            message=record.getMessage(),
            device=getattr(record, "device", "") or self.device,
            component=record.name,
        )
        if record.exc_info:
            entry.data["exception"] = self.formatException(record.exc_info)
        return entry.to_json()


# ----------------------------------------------------------------
# Bridge logger
# ----------------------------------------------------------------


class BridgeLogger(logging.LoggerAdapter):
    """
    Logger adapter for bridge components.

    debug/info/warning/error/exception come from LoggerAdapter and tag every
    record with the device. On top of that:
    - classified events (log_event, log_transport_failure, log_audit)
    - an in-memory trail of COMMUNICATION and AUDIT events
    """

    def __init__(
        self,
        name: str,
        device: str = "",
        log_dir: Path | None = None,
        enable_json: bool = True,
        enable_console: bool = True,
        level: int = logging.INFO,
        max_trail_entries: int = 1000,
    ):
        """
        Args:
            name: Logger name (typically module name)
            device: Device context ("zone1", "dzk-unit", ...)
            log_dir: Directory for JSON log files (None = no file logging)
            enable_json: Write JSON lines to log_dir
            enable_console: Write to stderr
            level: Minimum level for the console handler
            max_trail_entries: Oldest trail entries are dropped beyond this
        """
        base = logging.getLogger(name)
        base.setLevel(logging.DEBUG)
        base.propagate = False
        base.handlers.clear()
        super().__init__(base, {"device": device})

        self.device = device
        self.log_dir = Path(log_dir) if log_dir else None
        self.level = level

        if enable_console:
            console = logging.StreamHandler()
            console.setLevel(level)
            console.setFormatter(ConsoleFormatter())
            base.addHandler(console)

        if enable_json and self.log_dir:
            base.addHandler(self._json_handler())

        self.event_trail: deque[LogEntry] = deque(maxlen=max_trail_entries)
        self._trail_lock = asyncio.Lock()

    def process(self, msg, kwargs):
        # call-site extra (e.g. a category) is kept alongside the device
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def _json_handler(self) -> logging.Handler:
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # 5MB x 3 backups
        handler = logging.handlers.RotatingFileHandler(
            self.log_dir / f"{self.device or 'bachome'}.json.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(JSONFormatter(device=self.device))
        return handler

    # ----------------------------------------------------------------
    # Classified events
    # ----------------------------------------------------------------

    async def log_event(
        self,
        severity: EventSeverity,
        category: EventCategory,
        message: str,
        **kwargs,
    ) -> LogEntry:
        """
        Log a classified event; COMMUNICATION/AUDIT events also go to the trail.

        Args:
            severity: Event severity level
            category: Event category
            message: Event message
            **kwargs: LogEntry context (device, component, data)
        """
        kwargs.setdefault("device", self.device)
        entry = LogEntry(
            wall_time=time.time(),
            severity=severity,
            category=category,
            message=message,
            **kwargs,
        )

        self.logger.log(
            severity.logging_level,
            entry.to_human_readable(),
            extra={"device": entry.device, "category": category},
        )

        if category in TRAIL_CATEGORIES:
            async with self._trail_lock:
                self.event_trail.append(entry)

        return entry

    async def log_transport_failure(
        self, operation: str, error: BaseException, **kwargs
    ) -> LogEntry:
        """Record a failed BACnet read/write that was not propagated."""
        data = {**kwargs.pop("data", {}), "operation": operation, "error": str(error)}
        return await self.log_event(
            EventSeverity.ERROR,
            EventCategory.COMMUNICATION,
            f"{operation}: An error occurred: {error}",
            data=data,
            **kwargs,
        )

    async def log_audit(self, message: str, action: str = "", **kwargs) -> LogEntry:
        """Record a command issued to the unit."""
        data = {**kwargs.pop("data", {}), "action": action}
        return await self.log_event(
            EventSeverity.NOTICE, EventCategory.AUDIT, message, data=data, **kwargs
        )

    # ----------------------------------------------------------------
    # Event trail
    # ----------------------------------------------------------------

    async def get_event_trail(
        self,
        limit: int = 100,
        severity: EventSeverity | None = None,
        category: EventCategory | None = None,
    ) -> list[LogEntry]:
        """Most recent trail entries (oldest first), optionally filtered."""
        async with self._trail_lock:
            entries = [
                e
                for e in self.event_trail
                if (severity is None or e.severity is severity)
                and (category is None or e.category is category)
            ]
        return entries[-limit:]

    async def clear_event_trail(self) -> int:
        """Empty the trail; returns how many entries were dropped."""
        async with self._trail_lock:
            count = len(self.event_trail)
            self.event_trail.clear()
        return count


# ----------------------------------------------------------------
# Logger registry
# ----------------------------------------------------------------

_loggers: dict[str, BridgeLogger] = {}
_loggers_lock = threading.Lock()
_default_log_dir: Path | None = None
_default_level: int = logging.INFO


def configure_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> None:
    """
    Set defaults for loggers created after this call.

    Args:
        log_dir: Directory for JSON log files
        level: Console level, as int or name ("DEBUG", "INFO", ...)
    """
    global _default_log_dir, _default_level

    if log_dir:
        _default_log_dir = Path(log_dir)
        _default_log_dir.mkdir(parents=True, exist_ok=True)

    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        level = resolved if isinstance(resolved, int) else logging.INFO
    _default_level = level


def get_logger(name: str, device: str = "", **kwargs) -> BridgeLogger:
    """
    Return the BridgeLogger for (name, device), creating it on first use.

    Args:
        name: Logger name (typically __name__)
        device: Device context
        **kwargs: Extra BridgeLogger arguments, used only on creation
    """
    key = f"{name}:{device}"

    with _loggers_lock:
        logger = _loggers.get(key)
        if logger is None:
            if _default_log_dir and "log_dir" not in kwargs:
                kwargs["log_dir"] = _default_log_dir
            kwargs.setdefault("level", _default_level)
            logger = _loggers[key] = BridgeLogger(name, device, **kwargs)
        return logger
