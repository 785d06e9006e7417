"""Mathematical utilities for track analysis."""

from .statistics import Statistics, pearson_correlation

__all__ = [
    "Statistics",
    "pearson_correlation",
]
