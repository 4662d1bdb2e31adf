# bachome/exceptions.py
"""Exceptions raised by the DZK bridge."""

from __future__ import annotations


class BachomeError(Exception):
    """Base class for all bachome exceptions."""

    HINT: None | str = None

    def __init__(self, *args: object):
        super().__init__(*args)
        self.message: str | None = str(args[0]) if args else None

    def __str__(self) -> str:
        if self.message and self.HINT:
            return f"{self.message} (hint: {self.HINT})"
        if self.message:
            return self.message
        if self.HINT:
            return f"Hint: {self.HINT}"
        return ""


class ConfigurationError(BachomeError):
    """A configuration file is malformed."""


class UnknownObjectError(BachomeError):
    """The directory has no entry for the requested scope/key."""


class AccessDeniedError(BachomeError):
    """A write was attempted against a read-only directory entry."""


class TransportError(BachomeError):
    """A present-value read or write failed on the network."""

    def __init__(self, *args: object, cause: BaseException | None = None):
        super().__init__(*args)
        self.cause = cause
