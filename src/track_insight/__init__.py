"""
Track Insight - analytical queries over a flat table of music tracks.

Loads track records (audio features, YouTube engagement, Spotify streams)
into an immutable in-memory store and answers a fixed set of analyses
with group-by aggregation, windowed ranking and Pearson correlation.
"""

__version__ = "0.1.0"

from .loader import load_csv
from .models import UNDEFINED, AlbumType, TrackRecord
from .queries import QUERIES, run_all, run_query
from .store import RecordStore

__all__ = [
    "load_csv",  # CSV export -> RecordStore
    "RecordStore",
    "TrackRecord",
    "AlbumType",
    "UNDEFINED",
    "QUERIES",
    "run_query",
    "run_all",
]
