"""The named track analyses.

Each query is a pure function of the loaded records: it reads the store,
composes the aggregation, ranking and statistics primitives, and returns
a plain result (list of tuples, mapping, set or scalar). No query depends
on another, so ``run_all`` may evaluate them in any order or in parallel.

    store = load_csv("Spotify_Youtube.csv")
    top5_artists_by_stream(store)        # [(artist, total_stream), ...]
    run_query("top3_per_platform", store)
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, NamedTuple, Optional, Set, Tuple, Union

from .config import DEFAULT_CONFIG, DEFAULT_THRESHOLDS, AnalysisConfig
from .engine import (
    RankMethod,
    avg_of,
    count,
    group_by,
    having,
    is_defined,
    rank_within,
    safe_divide,
    sum_of,
    top_n,
)
from .exceptions import InsufficientDataError, QueryError
from .logging_config import get_logger
from .math import Statistics, pearson_correlation
from .models import UNDEFINED, AlbumType, TrackRecord
from .store import RecordStore

logger = get_logger(__name__)

Records = Union[RecordStore, Iterable[TrackRecord]]

_T = DEFAULT_THRESHOLDS


class RankedTrack(NamedTuple):
    track: str
    stream: float
    rank: int


def _rows(records: Records) -> Tuple[TrackRecord, ...]:
    if isinstance(records, RecordStore):
        return records.all()
    return tuple(records)


def _by_artist(r: TrackRecord) -> str:
    return r.artist


def _by_album(r: TrackRecord) -> Optional[str]:
    return r.album


def _sorted_desc(pairs: List[tuple], index: int = 1) -> List[tuple]:
    return sorted(pairs, key=lambda p: p[index], reverse=True)


# ── listing & filtering ───────────────────────────────────────────────


def tracks_with_artists(records: Records) -> List[Tuple[str, str]]:
    """Every (track, artist) pair in load order."""
    return [(r.track, r.artist) for r in _rows(records)]


def tracks_in_album(records: Records, name: str) -> List[str]:
    """Track names belonging to album ``name``."""
    return [r.track for r in _rows(records) if r.album == name]


def distinct_album_types(records: Records) -> Set[AlbumType]:
    return {r.album_type for r in _rows(records) if r.album_type is not None}


def high_dance_energy(
    records: Records,
    min_danceability: float = _T.min_danceability,
    min_energy: float = _T.min_energy,
) -> List[TrackRecord]:
    """Tracks that are both danceable and energetic (exclusive bounds)."""
    return [
        r
        for r in _rows(records)
        if r.danceability is not None
        and r.energy is not None
        and r.danceability > min_danceability
        and r.energy > min_energy
    ]


def high_liveness_low_acoustic(
    records: Records,
    min_liveness: float = _T.min_liveness,
    max_acousticness: float = _T.max_acousticness,
) -> List[TrackRecord]:
    """Live-sounding, non-acoustic tracks."""
    return [
        r
        for r in _rows(records)
        if r.liveness is not None
        and r.acousticness is not None
        and r.liveness > min_liveness
        and r.acousticness < max_acousticness
    ]


def fully_instrumental(records: Records) -> List[TrackRecord]:
    return [r for r in _rows(records) if r.instrumentalness == 1]


# ── counting ──────────────────────────────────────────────────────────


def total_track_count(records: Records) -> int:
    return len(_rows(records))


def count_official_video(records: Records) -> int:
    return sum(1 for r in _rows(records) if r.official_video is True)


# ── aggregation ───────────────────────────────────────────────────────


def top10_most_viewed(records: Records, limit: int = _T.top_viewed_limit) -> List[Tuple[str, float]]:
    """Most viewed tracks, highest first. Rows without views are skipped."""
    ranked = rank_within(_rows(records), None, lambda r: r.views, RankMethod.ROW_NUMBER)
    return [(r.record.track, r.record.views) for r in top_n(ranked, limit)]


def avg_duration_per_artist(records: Records) -> Dict[str, Optional[float]]:
    groups = group_by(_rows(records), _by_artist, [avg_of("duration_min")])
    return {artist: agg["avg_duration_min"] for artist, agg in groups.items()}


def top5_artists_by_stream(records: Records, limit: int = _T.top_artists_limit) -> List[Tuple[str, float]]:
    """Artists with the most total streams.

    Artists with no stream figures at all are left out.
    """
    groups = group_by(_rows(records), _by_artist, [sum_of("stream")])
    totals = [(artist, agg["sum_stream"]) for artist, agg in groups.items() if agg["sum_stream"] is not None]
    return _sorted_desc(totals)[:limit]


def avg_valence_per_album(records: Records) -> Dict[str, Optional[float]]:
    groups = group_by(_rows(records), _by_album, [avg_of("valence")], drop_null_keys=True)
    return {album: agg["avg_valence"] for album, agg in groups.items()}


def albums_over_1M_streams(records: Records, min_streams: float = _T.album_min_streams) -> List[Tuple[str, float]]:
    """Albums whose total streams exceed ``min_streams``, highest first."""
    groups = group_by(_rows(records), _by_album, [sum_of("stream")], drop_null_keys=True)
    kept = having(groups, lambda _, agg: agg["sum_stream"] is not None and agg["sum_stream"] > min_streams)
    return _sorted_desc([(album, agg["sum_stream"]) for album, agg in kept.items()])


def artist_with_most_likes(records: Records) -> Optional[Tuple[str, float]]:
    groups = group_by(_rows(records), _by_artist, [sum_of("likes")])
    totals = [(artist, agg["sum_likes"]) for artist, agg in groups.items() if agg["sum_likes"] is not None]
    if not totals:
        return None
    return _sorted_desc(totals)[0]


def top_engagement_artist(records: Records) -> Optional[Tuple[str, float]]:
    """Artist with the highest (likes + comments) / views.

    Artists whose views sum to zero have no defined rate and are skipped.
    """
    groups = group_by(_rows(records), _by_artist, [sum_of("likes"), sum_of("comments"), sum_of("views")])

    rates = []
    for artist, agg in groups.items():
        engaged = (agg["sum_likes"] or 0) + (agg["sum_comments"] or 0)
        rate = safe_divide(engaged, agg["sum_views"])
        if is_defined(rate):
            rates.append((artist, rate))
        else:
            logger.debug("Engagement rate undefined for %s", artist)

    if not rates:
        return None
    return _sorted_desc(rates)[0]


def albums_over_5tracks_2Bviews(
    records: Records,
    min_tracks: int = _T.album_min_tracks,
    min_views: float = _T.album_min_views,
) -> List[Tuple[str, int, float]]:
    """Albums with more than ``min_tracks`` tracks and ``min_views`` total views."""
    groups = group_by(_rows(records), _by_album, [count("tracks"), sum_of("views")], drop_null_keys=True)
    kept = having(
        groups,
        lambda _, agg: agg["tracks"] > min_tracks and agg["sum_views"] is not None and agg["sum_views"] > min_views,
    )
    rows = [(album, agg["tracks"], agg["sum_views"]) for album, agg in kept.items()]
    return _sorted_desc(rows, index=2)


def artists_above_avg_song_count(records: Records) -> List[Tuple[str, int]]:
    """Artists with more songs than the average artist, fewest first."""
    groups = group_by(_rows(records), _by_artist, [count("songs")])
    counts = [(artist, agg["songs"]) for artist, agg in groups.items()]
    average = Statistics.mean([c for _, c in counts])
    return sorted([(a, c) for a, c in counts if c > average], key=lambda p: p[1])


# ── ranking ───────────────────────────────────────────────────────────


def top3_per_platform(records: Records, n: int = _T.top_per_platform) -> Dict[str, List[Tuple[str, float]]]:
    """Most streamed tracks per most-played-on platform.

    Row-number ranking: exactly ``n`` rows per platform at most, ties go
    to the row loaded first.
    """
    rows = [r for r in _rows(records) if r.most_played_on is not None]
    ranked = rank_within(rows, lambda r: r.most_played_on, lambda r: r.stream, RankMethod.ROW_NUMBER)

    result: Dict[str, List[Tuple[str, float]]] = {}
    for item in top_n(ranked, n):
        result.setdefault(item.partition, []).append((item.record.track, item.record.stream))
    return result


def top3_streamed_in_album(records: Records, name: str, n: int = _T.top_per_album) -> List[RankedTrack]:
    """Most streamed tracks of one album with competitive (RANK) ranking."""
    rows = [r for r in _rows(records) if r.album == name]
    ranked = rank_within(rows, None, lambda r: r.stream, RankMethod.RANK)
    return [RankedTrack(item.record.track, item.record.stream, item.rank) for item in top_n(ranked, n)]


# ── statistics ────────────────────────────────────────────────────────


def dance_energy_correlation(records: Records) -> Any:
    """Pearson correlation of danceability and energy, or UNDEFINED."""
    try:
        return pearson_correlation(_rows(records), "danceability", "energy")
    except InsufficientDataError as e:
        logger.debug("Correlation undefined: %s", e)
        return UNDEFINED


# ── registry ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class QuerySpec:
    """A registered query and how to feed it configuration."""

    name: str
    func: Callable[..., Any]
    description: str
    columns: Tuple[str, ...] = ("value",)
    needs_album: bool = False
    # function keyword -> QueryThresholds attribute
    thresholds: Dict[str, str] = field(default_factory=dict)

    def bind(self, config: AnalysisConfig) -> Dict[str, Any]:
        return {param: getattr(config.thresholds, attr) for param, attr in self.thresholds.items()}

    @property
    def limit_param(self) -> Optional[str]:
        """Keyword that caps the result size, if the query has one."""
        for param in ("limit", "n"):
            if param in self.thresholds:
                return param
        return None


_RECORD_COLUMNS = ("artist", "track", "album")

_SPECS = [
    QuerySpec("tracks_with_artists", tracks_with_artists, "Every track with its artist", ("track", "artist")),
    QuerySpec("tracks_in_album", tracks_in_album, "Tracks of one album", ("track",), needs_album=True),
    QuerySpec("distinct_album_types", distinct_album_types, "Distinct album types", ("album_type",)),
    QuerySpec(
        "top10_most_viewed",
        top10_most_viewed,
        "Most viewed tracks",
        ("track", "views"),
        thresholds={"limit": "top_viewed_limit"},
    ),
    QuerySpec("total_track_count", total_track_count, "Number of tracks", ("tracks",)),
    QuerySpec(
        "avg_duration_per_artist",
        avg_duration_per_artist,
        "Average duration (min) per artist",
        ("artist", "avg_duration_min"),
    ),
    QuerySpec(
        "top5_artists_by_stream",
        top5_artists_by_stream,
        "Artists with the most streams",
        ("artist", "total_stream"),
        thresholds={"limit": "top_artists_limit"},
    ),
    QuerySpec(
        "high_dance_energy",
        high_dance_energy,
        "Danceable and energetic tracks",
        _RECORD_COLUMNS,
        thresholds={"min_danceability": "min_danceability", "min_energy": "min_energy"},
    ),
    QuerySpec("avg_valence_per_album", avg_valence_per_album, "Average valence per album", ("album", "avg_valence")),
    QuerySpec(
        "albums_over_1M_streams",
        albums_over_1M_streams,
        "Albums above the stream threshold",
        ("album", "total_stream"),
        thresholds={"min_streams": "album_min_streams"},
    ),
    QuerySpec(
        "artist_with_most_likes",
        artist_with_most_likes,
        "Artist with the most likes",
        ("artist", "total_likes"),
    ),
    QuerySpec(
        "top3_per_platform",
        top3_per_platform,
        "Most streamed tracks per platform",
        ("platform", "track", "stream"),
        thresholds={"n": "top_per_platform"},
    ),
    QuerySpec("count_official_video", count_official_video, "Tracks with an official video", ("tracks",)),
    QuerySpec(
        "high_liveness_low_acoustic",
        high_liveness_low_acoustic,
        "Live-sounding, non-acoustic tracks",
        _RECORD_COLUMNS,
        thresholds={"min_liveness": "min_liveness", "max_acousticness": "max_acousticness"},
    ),
    QuerySpec("fully_instrumental", fully_instrumental, "Fully instrumental tracks", _RECORD_COLUMNS),
    QuerySpec(
        "top_engagement_artist",
        top_engagement_artist,
        "Artist with the best engagement rate",
        ("artist", "engagement_rate"),
    ),
    QuerySpec(
        "top3_streamed_in_album",
        top3_streamed_in_album,
        "Most streamed tracks of one album",
        ("track", "stream", "rank"),
        needs_album=True,
        thresholds={"n": "top_per_album"},
    ),
    QuerySpec(
        "albums_over_5tracks_2Bviews",
        albums_over_5tracks_2Bviews,
        "Large albums above the view threshold",
        ("album", "track_count", "total_views"),
        thresholds={"min_tracks": "album_min_tracks", "min_views": "album_min_views"},
    ),
    QuerySpec(
        "dance_energy_correlation",
        dance_energy_correlation,
        "Danceability/energy correlation",
        ("correlation",),
    ),
    QuerySpec(
        "artists_above_avg_song_count",
        artists_above_avg_song_count,
        "Artists with more songs than average",
        ("artist", "track_count"),
    ),
]

QUERIES: Dict[str, QuerySpec] = {spec.name: spec for spec in _SPECS}


def get_query(name: str) -> QuerySpec:
    spec = QUERIES.get(name)
    if spec is None:
        raise QueryError(name, f"unknown query; choose from: {', '.join(QUERIES)}")
    return spec


def run_query(
    name: str,
    records: Records,
    config: Optional[AnalysisConfig] = None,
    album: Optional[str] = None,
    limit: Optional[int] = None,
    **params: Any,
) -> Any:
    """Run a registered query with thresholds taken from ``config``.

    Explicit ``params`` win over configured thresholds, and ``limit`` wins
    over the query's own size cap (``limit`` or ``n``).

    Raises:
        QueryError: Unknown name, an album query without ``album``, or a
            ``limit`` for a query that returns every matching row.
    """
    spec = get_query(name)
    kwargs = spec.bind(config or DEFAULT_CONFIG)
    kwargs.update(params)

    if limit is not None:
        if spec.limit_param is None:
            raise QueryError(name, "query does not take a limit")
        if limit < 1:
            raise QueryError(name, f"limit must be at least 1, got {limit}")
        kwargs[spec.limit_param] = limit

    if spec.needs_album:
        if album is None:
            raise QueryError(name, "an album name is required")
        kwargs["name"] = album

    logger.debug("Running %s with %s", name, kwargs)
    return spec.func(records, **kwargs)


def run_all(
    records: Records,
    config: Optional[AnalysisConfig] = None,
    workers: Optional[int] = None,
    album: Optional[str] = None,
) -> Dict[str, Any]:
    """Run every registered query.

    Album queries are skipped when no ``album`` is given. Results are keyed
    in registry order whatever the completion order.
    """
    config = config or DEFAULT_CONFIG
    workers = workers or config.workers
    rows = _rows(records)

    names = [spec.name for spec in _SPECS if album is not None or not spec.needs_album]

    if workers <= 1:
        return {name: run_query(name, rows, config, album=album) for name in names}

    logger.info("Running %d queries on %d threads", len(names), workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = {name: pool.submit(run_query, name, rows, config, album) for name in names}
        return {name: futures[name].result() for name in names}
