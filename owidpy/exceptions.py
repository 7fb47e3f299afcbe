"""Errors raised by owidpy when OWID refuses or cannot serve a request."""


class OwidError(Exception):
    """Base class for owidpy errors."""


class ChartNotFoundError(OwidError):
    """Raised when a chart does not exist."""


class LicenseError(OwidError):
    """Raised when chart data cannot be downloaded due to licensing."""
