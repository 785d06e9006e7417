"""Descriptive statistics and Pearson correlation over track fields."""

import math
import statistics as stdlib_stats
from typing import Iterable

import numpy as np

from ..exceptions import InsufficientDataError
from ..models import TrackRecord


class Statistics:
    """Statistical helpers."""

    @staticmethod
    def mean(values: list[float]) -> float:
        """Compute arithmetic mean."""
        if not values:
            return 0.0
        return stdlib_stats.mean(values)

    @staticmethod
    def pearson(xs: list[float], ys: list[float]) -> float:
        """
        Pearson correlation from raw moments:

            r = (n*Sxy - Sx*Sy) / (sqrt(n*Sxx - Sx^2) * sqrt(n*Syy - Sy^2))

        Args:
            xs: First variable
            ys: Second variable, same length as xs

        Returns:
            Correlation coefficient in [-1, 1]

        Raises:
            InsufficientDataError: Fewer than 2 pairs or zero variance
        """
        if len(xs) != len(ys):
            raise ValueError(f"length mismatch: {len(xs)} vs {len(ys)}")

        n = len(xs)
        if n < 2:
            raise InsufficientDataError("correlation needs at least 2 pairs", minimum_required=2)

        x = np.asarray(xs, dtype=np.float64)
        y = np.asarray(ys, dtype=np.float64)

        sum_x = float(np.sum(x))
        sum_y = float(np.sum(y))
        sum_xy = float(np.sum(x * y))
        sum_xx = float(np.sum(x * x))
        sum_yy = float(np.sum(y * y))

        var_x = n * sum_xx - sum_x**2
        var_y = n * sum_yy - sum_y**2

        # A constant column can still leave a tiny positive variance after rounding
        if np.ptp(x) == 0 or np.ptp(y) == 0 or var_x <= 0 or var_y <= 0:
            raise InsufficientDataError("variance is zero; correlation undefined")

        r = (n * sum_xy - sum_x * sum_y) / (math.sqrt(var_x) * math.sqrt(var_y))
        return max(-1.0, min(1.0, r))


def pearson_correlation(records: Iterable[TrackRecord], field_x: str, field_y: str) -> float:
    """Correlation between two numeric fields over rows where both are present.

    Raises:
        InsufficientDataError: Fewer than 2 complete pairs or zero variance.
    """
    xs: list[float] = []
    ys: list[float] = []
    for record in records:
        x = record.get(field_x)
        y = record.get(field_y)
        if x is None or y is None:
            continue
        xs.append(x)
        ys.append(y)
    return Statistics.pearson(xs, ys)
