"""Analysis-related exceptions: insufficient data, unknown queries."""

from typing import Dict, Optional

from .base import TrackInsightError


class AnalysisError(TrackInsightError):
    """Base class for analysis-related errors."""
    pass


class InsufficientDataError(AnalysisError):
    """Raised when there's not enough data for a statistic."""

    def __init__(self, reason: str, minimum_required: Optional[int] = None):
        details: Dict[str, str] = {"reason": reason}
        if minimum_required is not None:
            details["minimum_required"] = str(minimum_required)

        super().__init__(f"Insufficient data for analysis: {reason}", details=details)
        self.reason = reason
        self.minimum_required = minimum_required


class QueryError(AnalysisError):
    """Raised when a named query cannot be resolved or invoked."""

    def __init__(self, name: str, reason: str):
        super().__init__(
            f"Cannot run query {name!r}",
            details={"query": name, "reason": reason},
        )
        self.name = name
        self.reason = reason
