"""Exception hierarchy for Track Insight."""

from .analysis import AnalysisError, InsufficientDataError, QueryError
from .base import TrackInsightError
from .config import ConfigurationError, InvalidConfigError
from .data import DataError, DataFileError, SchemaError

__all__ = [
    "TrackInsightError",
    "DataError",
    "SchemaError",
    "DataFileError",
    "AnalysisError",
    "InsufficientDataError",
    "QueryError",
    "ConfigurationError",
    "InvalidConfigError",
]
