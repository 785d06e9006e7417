"""Base formatter interface and result tabulation."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, List, Sequence, Tuple

from ..models import UNDEFINED, TrackRecord
from ..queries import QUERIES

Row = Tuple[Any, ...]


def _cell(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _row(item: Any) -> Row:
    if isinstance(item, TrackRecord):
        return (item.artist, item.track, item.album)
    if isinstance(item, tuple):
        return tuple(_cell(v) for v in item)
    return (_cell(item),)


def tabulate(name: str, result: Any) -> Tuple[Sequence[str], List[Row]]:
    """Flatten a query result into column names and rows.

    Mappings become key/value rows (list values are expanded, one row per
    item with the key prefixed), sets are sorted, a missing single-row
    result becomes no rows. ``UNDEFINED`` cells are kept as-is for the
    concrete formatter to spell.
    """
    spec = QUERIES.get(name)
    columns = spec.columns if spec is not None else ("value",)

    if result is None:
        rows: List[Row] = []
    elif isinstance(result, dict):
        rows = []
        for key, value in result.items():
            if isinstance(value, list):
                rows.extend((_cell(key),) + _row(item) for item in value)
            else:
                rows.append((_cell(key), _cell(value)))
    elif isinstance(result, (set, frozenset)):
        rows = sorted((_row(item) for item in result), key=lambda r: str(r[0]))
    elif isinstance(result, list):
        rows = [_row(item) for item in result]
    elif isinstance(result, tuple):
        rows = [_row(result)]
    else:
        rows = [(_cell(result),)]

    if spec is None and rows:
        width = max(len(r) for r in rows)
        columns = tuple(f"col{i}" for i in range(1, width + 1)) if width > 1 else ("value",)

    return columns, rows


def is_undefined(value: Any) -> bool:
    return value is UNDEFINED


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, name: str, result: Any) -> None:
        """Render a query result to stdout."""

    @abstractmethod
    def format(self, name: str, result: Any) -> str:
        """Return formatted string representation of a query result."""

    def render_many(self, results: dict) -> None:
        for name, result in results.items():
            self.render(name, result)
