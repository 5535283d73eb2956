"""
Exception hierarchy for Sales Analytics.

Data problems inside a CSV never raise; they become diagnostics. These
exceptions cover the recoverable failures around the data.
"""


class SalesAnalyticsError(Exception):
    """Base class for all package errors"""


class SourceFetchError(SalesAnalyticsError):
    """Raw CSV text could not be fetched or read from its source"""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to read {source}: {reason}")


class InvalidFilterError(SalesAnalyticsError, ValueError):
    """Filter update rejected (unknown field or inverted date range)"""
