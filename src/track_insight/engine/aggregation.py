"""Group-by aggregation with SQL null semantics.

Aggregation runs in two explicit stages, the way GROUP BY ... HAVING does:

    groups = group_by(records, key_fn, [count(), sum_of("stream")])
    big = having(groups, lambda key, agg: agg["sum_stream"] > 1_000_000)

Null handling follows SQL:
    - count() counts rows, regardless of nulls
    - sum/avg/min/max skip null values; an all-null group yields None
    - drop_null_keys=True removes the group keyed by None
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional, Sequence

from ..models import UNDEFINED, TrackRecord

Aggregates = Dict[str, Any]


class MetricKind(Enum):
    COUNT = "count"
    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"


@dataclass(frozen=True)
class Metric:
    """A named aggregate over one field of each group."""

    name: str
    kind: MetricKind
    field: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind is not MetricKind.COUNT and self.field is None:
            raise ValueError(f"{self.kind.value} metric {self.name!r} needs a field")


def count(name: str = "count") -> Metric:
    return Metric(name, MetricKind.COUNT)


def sum_of(field: str, name: Optional[str] = None) -> Metric:
    return Metric(name or f"sum_{field}", MetricKind.SUM, field)


def avg_of(field: str, name: Optional[str] = None) -> Metric:
    return Metric(name or f"avg_{field}", MetricKind.AVG, field)


def min_of(field: str, name: Optional[str] = None) -> Metric:
    return Metric(name or f"min_{field}", MetricKind.MIN, field)


def max_of(field: str, name: Optional[str] = None) -> Metric:
    return Metric(name or f"max_{field}", MetricKind.MAX, field)


def _reduce(metric: Metric, rows: List[TrackRecord]) -> Any:
    if metric.kind is MetricKind.COUNT:
        return len(rows)

    values = [getattr(r, metric.field) for r in rows]
    values = [v for v in values if v is not None]
    if not values:
        return None

    if metric.kind is MetricKind.SUM:
        return sum(values)
    if metric.kind is MetricKind.AVG:
        return sum(values) / len(values)
    if metric.kind is MetricKind.MIN:
        return min(values)
    return max(values)


def group_by(
    records: Iterable[TrackRecord],
    key_fn: Callable[[TrackRecord], Hashable],
    metrics: Sequence[Metric],
    drop_null_keys: bool = False,
) -> Dict[Hashable, Aggregates]:
    """Aggregate records into ``{key: {metric_name: value}}``.

    Keys appear in the order they are first encountered.

    Args:
        records: Rows to aggregate.
        key_fn: Grouping key for a row.
        metrics: Aggregates to compute per group.
        drop_null_keys: Exclude the group whose key is ``None``.

    Returns:
        Mapping from group key to its aggregates.
    """
    partitions: Dict[Hashable, List[TrackRecord]] = {}
    for record in records:
        key = key_fn(record)
        if key is None and drop_null_keys:
            continue
        partitions.setdefault(key, []).append(record)

    return {
        key: {metric.name: _reduce(metric, rows) for metric in metrics}
        for key, rows in partitions.items()
    }


def having(
    groups: Dict[Hashable, Aggregates],
    predicate: Callable[[Hashable, Aggregates], bool],
) -> Dict[Hashable, Aggregates]:
    """Keep the groups for which ``predicate(key, aggregates)`` holds."""
    return {key: agg for key, agg in groups.items() if predicate(key, agg)}


def safe_divide(numerator: Any, denominator: Any) -> Any:
    """Divide, yielding ``UNDEFINED`` instead of failing.

    Undefined when either operand is None/UNDEFINED or the denominator
    is zero.
    """
    if numerator is None or denominator is None:
        return UNDEFINED
    if numerator is UNDEFINED or denominator is UNDEFINED:
        return UNDEFINED
    if denominator == 0:
        return UNDEFINED
    return numerator / denominator


def is_defined(value: Any) -> bool:
    """True unless the value is None or UNDEFINED."""
    return value is not None and value is not UNDEFINED
