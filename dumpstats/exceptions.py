"""
DumpStats Exceptions
"""


class DumpStatsError(Exception):
    """Base class for DumpStats errors."""


class SnapshotFormatError(DumpStatsError):
    """Snapshot file is missing, unreadable or not in the expected format."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid format of init file {path}: {reason}")


class AirlineDatabaseError(DumpStatsError):
    """Airline reference file is missing or malformed."""


class FeedError(DumpStatsError):
    """SBS feed connection could not be established or broke."""
