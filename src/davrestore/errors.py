"""Typed exceptions for davrestore."""


class DavRestoreError(Exception):
    """Base exception for davrestore failures."""


class ConfigError(DavRestoreError):
    """Raised when startup configuration is missing or invalid."""


class DiscoveryError(DavRestoreError):
    """Raised when the trash metadata query fails outright."""


class ParseError(DavRestoreError):
    """Raised when the trash metadata response is structurally unreadable."""


class TransportError(DavRestoreError):
    """Raised for network-level failures (connect, timeout, TLS)."""


class MaterializationError(DavRestoreError):
    """Raised when a destination ancestor directory cannot be created."""
