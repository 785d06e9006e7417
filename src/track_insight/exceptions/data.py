"""Data ingestion exceptions: malformed rows, unreadable files."""

from pathlib import Path
from typing import Dict, Optional

from .base import TrackInsightError


class DataError(TrackInsightError):
    """Base class for errors raised while ingesting track data."""

    pass


class SchemaError(DataError):
    """Raised when a row is missing a required field or holds an invalid value."""

    def __init__(self, reason: str, row: Optional[int] = None, field: Optional[str] = None):
        details: Dict[str, str] = {"reason": reason}
        if row is not None:
            details["row"] = str(row)
        if field is not None:
            details["field"] = field

        super().__init__(f"Schema violation: {reason}", details=details)
        self.reason = reason
        self.row = row
        self.field = field


class DataFileError(DataError):
    """Raised when a data file cannot be read."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Cannot read data file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
