"""Aggregation and ranking primitives used by the query façade."""

from .aggregation import (
    Metric,
    MetricKind,
    avg_of,
    count,
    group_by,
    having,
    is_defined,
    max_of,
    min_of,
    safe_divide,
    sum_of,
)
from .ranking import RankMethod, Ranked, rank_within, top_n

__all__ = [
    "Metric",
    "MetricKind",
    "count",
    "sum_of",
    "avg_of",
    "min_of",
    "max_of",
    "group_by",
    "having",
    "safe_divide",
    "is_defined",
    "RankMethod",
    "Ranked",
    "rank_within",
    "top_n",
]
