"""Windowed ranking: RANK / DENSE_RANK / ROW_NUMBER over partitions.

``rank_within`` is the in-memory counterpart of

    <method>() OVER (PARTITION BY <partition_fn> ORDER BY <order_fn> DESC)

It partitions the rows, sorts each partition by the ordering key and then
assigns ranks according to the tie policy:

    values      10  10   7   5
    RANK         1   1   3   4
    DENSE_RANK   1   1   2   3
    ROW_NUMBER   1   2   3   4

Sorting is stable, so ROW_NUMBER breaks ties by input order.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Hashable, Iterable, List, NamedTuple, Optional

from ..models import TrackRecord


class RankMethod(Enum):
    RANK = "rank"
    DENSE_RANK = "dense_rank"
    ROW_NUMBER = "row_number"


class Ranked(NamedTuple):
    record: TrackRecord
    rank: int
    partition: Hashable = None


def _assign(rows: List[TrackRecord], order_fn: Callable[[TrackRecord], Any], method: RankMethod) -> List[int]:
    ranks: List[int] = []
    previous: Any = None
    dense = 0
    for position, row in enumerate(rows, start=1):
        value = order_fn(row)
        tied = position > 1 and value == previous
        if method is RankMethod.ROW_NUMBER:
            ranks.append(position)
        elif method is RankMethod.RANK:
            ranks.append(ranks[-1] if tied else position)
        else:
            if not tied:
                dense += 1
            ranks.append(dense)
        previous = value
    return ranks


def rank_within(
    records: Iterable[TrackRecord],
    partition_fn: Optional[Callable[[TrackRecord], Hashable]],
    order_fn: Callable[[TrackRecord], Any],
    method: RankMethod = RankMethod.RANK,
    descending: bool = True,
) -> List[Ranked]:
    """Rank rows within each partition.

    Args:
        records: Rows to rank.
        partition_fn: Partition key, or None for a single partition.
        order_fn: Ordering key. Rows where it returns None are dropped.
        method: Tie policy.
        descending: Highest value ranks first when True.

    Returns:
        ``Ranked`` rows, partitions in first-encounter order, each
        partition in rank order.
    """
    partitions: Dict[Hashable, List[TrackRecord]] = {}
    for record in records:
        if order_fn(record) is None:
            continue
        key = partition_fn(record) if partition_fn is not None else None
        partitions.setdefault(key, []).append(record)

    result: List[Ranked] = []
    for key, rows in partitions.items():
        ordered = sorted(rows, key=order_fn, reverse=descending)
        for record, rank in zip(ordered, _assign(ordered, order_fn, method)):
            result.append(Ranked(record, rank, key))
    return result


def top_n(ranked: Iterable[Ranked], n: int) -> List[Ranked]:
    """Keep rows ranked ``n`` or better.

    With RANK, ties on the boundary can return more than ``n`` rows.
    """
    if n < 0:
        raise ValueError(f"n must be non-negative, got {n}")
    return [r for r in ranked if r.rank <= n]
