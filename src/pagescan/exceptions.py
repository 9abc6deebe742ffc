"""Exceptions raised by pagescan.

Analysis itself never raises; these surface only while building
configuration or classifier pattern tables.
"""


class PageScanError(Exception):
    """Base exception for pagescan errors."""


class ConfigError(PageScanError):
    """Raised when analyzer configuration is missing or malformed."""


class InvalidPatternError(ConfigError):
    """Raised when an identifier pattern cannot be compiled."""
