"""Data models for Track Insight.

One ``TrackRecord`` per (artist, track, album) row of the source table.
Records are frozen: the dataset is read-only for the lifetime of an
analysis session.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from .exceptions import SchemaError


class AlbumType(Enum):
    """Release type of the album a track belongs to."""

    ALBUM = "album"
    SINGLE = "single"
    COMPILATION = "compilation"

    def __str__(self) -> str:
        return self.value


class _Undefined:
    """Tagged result of a ratio or statistic with no defined value."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __str__(self) -> str:
        return "undefined"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


# Features bounded to [0, 1]
BOUNDED_FEATURES = (
    "danceability",
    "energy",
    "speechiness",
    "acousticness",
    "instrumentalness",
    "liveness",
    "valence",
)

# Engagement and streaming counts, non-negative when present
COUNT_FIELDS = ("views", "likes", "comments", "stream")

REQUIRED_FIELDS = ("artist", "track")

_FLOAT_FIELDS = BOUNDED_FEATURES + ("loudness", "tempo", "duration_min") + COUNT_FIELDS
_BOOL_FIELDS = ("licensed", "official_video")

# Header variants seen in exports of the dataset -> canonical column
COLUMN_ALIASES: Dict[str, str] = {
    "view": "views",
    "streams": "stream",
    "most_playedon": "most_played_on",
    "mostplayedon": "most_played_on",
    "officialvideo": "official_video",
    "albumtype": "album_type",
}

_TRUE = ("true", "1", "yes", "t", "y")
_FALSE = ("false", "0", "no", "f", "n")


def canonical_column(name: str) -> str:
    """Normalise a source header to the canonical snake_case column name."""
    key = name.strip().lower().replace(" ", "_").replace("-", "_")
    return COLUMN_ALIASES.get(key, key)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str):
        return value.strip() == "" or value.strip().lower() in ("nan", "null", "none")
    return False


def _to_float(value: Any, field: str, row: Optional[int]) -> Optional[float]:
    if _is_blank(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise SchemaError(f"{field} is not numeric: {value!r}", row=row, field=field)


def _to_bool(value: Any, field: str, row: Optional[int]) -> Optional[bool]:
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    lower = str(value).strip().lower()
    if lower in _TRUE:
        return True
    if lower in _FALSE:
        return False
    raise SchemaError(f"{field} is not a boolean: {value!r}", row=row, field=field)


def _to_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


def _to_album_type(value: Any, row: Optional[int]) -> Optional[AlbumType]:
    if _is_blank(value):
        return None
    if isinstance(value, AlbumType):
        return value
    try:
        return AlbumType(str(value).strip().lower())
    except ValueError:
        raise SchemaError(f"unknown album_type: {value!r}", row=row, field="album_type")


@dataclass(frozen=True)
class TrackRecord:
    """A single track row: audio features, engagement and streaming counts."""

    artist: str
    track: str
    album: Optional[str] = None
    album_type: Optional[AlbumType] = None

    # Audio features
    danceability: Optional[float] = None
    energy: Optional[float] = None
    loudness: Optional[float] = None
    speechiness: Optional[float] = None
    acousticness: Optional[float] = None
    instrumentalness: Optional[float] = None
    liveness: Optional[float] = None
    valence: Optional[float] = None
    tempo: Optional[float] = None
    duration_min: Optional[float] = None

    # Engagement (YouTube) and streams (Spotify)
    views: Optional[float] = None
    likes: Optional[float] = None
    comments: Optional[float] = None
    stream: Optional[float] = None

    licensed: Optional[bool] = None
    official_video: Optional[bool] = None
    most_played_on: Optional[str] = None

    def get(self, field: str) -> Any:
        """Look up a column by its canonical name."""
        if field not in self.__dataclass_fields__:
            raise SchemaError(f"unknown field: {field}", field=field)
        return getattr(self, field)

    def to_dict(self) -> Dict[str, Any]:
        result = {f.name: getattr(self, f.name) for f in fields(self)}
        if self.album_type is not None:
            result["album_type"] = self.album_type.value
        return result

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any], index: Optional[int] = None) -> "TrackRecord":
        """Build a record from a loosely-typed mapping (e.g. a CSV row).

        Headers are normalised with :func:`canonical_column`, blank values
        become ``None`` and unknown columns are ignored.
        """
        data = {canonical_column(str(k)): v for k, v in row.items() if k is not None}

        values: Dict[str, Any] = {}
        for name in REQUIRED_FIELDS:
            text = _to_text(data.get(name))
            if text is None:
                raise SchemaError(f"missing required field {name!r}", row=index, field=name)
            values[name] = text

        values["album"] = _to_text(data.get("album"))
        values["album_type"] = _to_album_type(data.get("album_type"), index)
        values["most_played_on"] = _to_text(data.get("most_played_on"))

        for name in _FLOAT_FIELDS:
            values[name] = _to_float(data.get(name), name, index)

        if values["duration_min"] is None and not _is_blank(data.get("duration_ms")):
            duration_ms = _to_float(data.get("duration_ms"), "duration_ms", index)
            values["duration_min"] = duration_ms / 60000.0

        for name in _BOOL_FIELDS:
            values[name] = _to_bool(data.get(name), name, index)

        return cls(**values)
