"""Restore items from a WebDAV trash collection back to their original locations."""

__version__ = "0.1.0"
