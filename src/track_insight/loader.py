"""CSV ingestion for the Spotify/YouTube track export."""

import csv
from pathlib import Path
from typing import Dict, List, Union

from .exceptions import DataFileError
from .logging_config import get_logger
from .store import RecordStore

logger = get_logger(__name__)


def read_rows(path: Union[str, Path]) -> List[Dict[str, str]]:
    """Read a CSV file into header-keyed rows.

    A leading unnamed index column (as written by ``DataFrame.to_csv``)
    is dropped.

    Raises:
        DataFileError: If the file is missing or not valid CSV.
    """
    path = Path(path)
    if not path.is_file():
        raise DataFileError(path, "file not found")

    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            reader = csv.DictReader(f)
            if reader.fieldnames is None:
                raise DataFileError(path, "file is empty")
            rows = []
            for row in reader:
                row.pop("", None)
                row.pop(None, None)
                rows.append(row)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise DataFileError(path, str(e))

    logger.debug("Read %d rows from %s", len(rows), path)
    return rows


def load_csv(path: Union[str, Path], strict: bool = True) -> RecordStore:
    """Read a CSV export and load it into a ``RecordStore``."""
    return RecordStore.load(read_rows(path), strict=strict)
