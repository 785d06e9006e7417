"""RecordStore: the immutable in-memory track table.

The store is loaded once and never mutated afterwards. Every query reads
the same ordered view, so queries can run in any order (or concurrently)
without affecting each other.

Usage:
    from track_insight.store import RecordStore

    store = RecordStore.load(rows)          # TrackRecords or mappings
    for record in store.all():
        ...

Validation:
    strict=True (default) rejects bounded features outside [0, 1] and
    negative counts/durations. strict=False passes such values through.
    Missing ``artist``/``track`` is always rejected.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator, Mapping, Tuple, Union

from .exceptions import SchemaError
from .logging_config import get_logger
from .models import BOUNDED_FEATURES, COUNT_FIELDS, REQUIRED_FIELDS, TrackRecord

logger = get_logger(__name__)

RowLike = Union[TrackRecord, Mapping[str, Any]]


def validate_record(record: TrackRecord, index: int, strict: bool = True) -> None:
    """Check a record against the table schema.

    Raises:
        SchemaError: On the first violated constraint.
    """
    for name in REQUIRED_FIELDS:
        value = getattr(record, name)
        if not isinstance(value, str) or not value.strip():
            raise SchemaError(f"missing required field {name!r}", row=index, field=name)

    if not strict:
        return

    for name in BOUNDED_FEATURES:
        value = getattr(record, name)
        if value is not None and not 0.0 <= value <= 1.0:
            raise SchemaError(f"{name}={value} outside [0, 1]", row=index, field=name)

    for name in COUNT_FIELDS + ("duration_min",):
        value = getattr(record, name)
        if value is not None and value < 0:
            raise SchemaError(f"{name}={value} is negative", row=index, field=name)


class RecordStore:
    """Ordered, read-only collection of ``TrackRecord``."""

    __slots__ = ("_records",)

    def __init__(self, records: Tuple[TrackRecord, ...] = ()):
        self._records = tuple(records)

    @classmethod
    def load(cls, rows: Iterable[RowLike], strict: bool = True) -> "RecordStore":
        """Ingest rows in order, validating each one.

        Ingestion aborts on the first malformed row.
        """
        records = []
        for index, row in enumerate(rows):
            try:
                record = row if isinstance(row, TrackRecord) else TrackRecord.from_mapping(row, index)
                validate_record(record, index, strict=strict)
            except SchemaError as e:
                logger.debug("Rejected row %d: %s", index, e)
                raise
            records.append(record)

        logger.info("Loaded %d track records", len(records))
        return cls(tuple(records))

    def all(self) -> Tuple[TrackRecord, ...]:
        """All records in load order."""
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TrackRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> TrackRecord:
        return self._records[index]

    def __repr__(self) -> str:
        return f"RecordStore({len(self._records)} records)"
