"""Shared test fixtures for Track Insight."""

import pytest

from track_insight.models import AlbumType, TrackRecord
from track_insight.store import RecordStore


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def make_track(artist="A", track="T", **fields):
    """TrackRecord with only the given fields set."""
    return TrackRecord(artist=artist, track=track, **fields)


@pytest.fixture
def three_rows():
    """Two tracks by A on album X, one by B on album Y."""
    return [
        make_track("A", "T1", album="X", stream=100.0),
        make_track("A", "T2", album="X", stream=200.0),
        make_track("B", "T3", album="Y", stream=50.0),
    ]


@pytest.fixture
def sample_records():
    """Six tracks covering nulls, zero views and every album type."""
    return [
        TrackRecord(
            artist="Gorillaz", track="Feel Good Inc.", album="Demon Days",
            album_type=AlbumType.ALBUM, danceability=0.818, energy=0.705,
            liveness=0.613, acousticness=0.00836, instrumentalness=0.00233,
            valence=0.772, duration_min=3.71, views=693_555_221.0,
            likes=6_220_896.0, comments=169_907.0, stream=1_040_234_854.0,
            licensed=True, official_video=True, most_played_on="Spotify",
        ),
        TrackRecord(
            artist="Gorillaz", track="Rhinestone Eyes", album="Plastic Beach",
            album_type=AlbumType.ALBUM, danceability=0.676, energy=0.703,
            liveness=0.0463, acousticness=0.0869, instrumentalness=0.000687,
            valence=0.852, duration_min=3.35, views=72_011_645.0,
            likes=1_079_128.0, comments=31_003.0, stream=310_083_733.0,
            licensed=True, official_video=True, most_played_on="Spotify",
        ),
        TrackRecord(
            artist="Gorillaz", track="New Gold", album="New Gold",
            album_type=AlbumType.SINGLE, danceability=0.695, energy=0.923,
            liveness=0.0825, acousticness=0.0425, instrumentalness=0.0469,
            valence=0.551, duration_min=3.54, views=8_435_055.0,
            likes=282_142.0, comments=7_399.0, stream=63_063_467.0,
            licensed=True, official_video=True, most_played_on="Youtube",
        ),
        TrackRecord(
            artist="Daft Punk", track="Around the World", album="Homework",
            album_type=AlbumType.ALBUM, danceability=0.956, energy=0.795,
            liveness=0.0904, acousticness=0.00329, instrumentalness=0.889,
            valence=0.841, duration_min=7.15, views=230_000_000.0,
            likes=2_000_000.0, comments=50_000.0, stream=400_000_000.0,
            licensed=True, official_video=True, most_played_on="Spotify",
        ),
        TrackRecord(
            artist="Daft Punk", track="Live Jam", album=None,
            album_type=AlbumType.COMPILATION, danceability=0.5, energy=0.9,
            liveness=0.95, acousticness=0.05, instrumentalness=1.0,
            valence=0.4, duration_min=4.0, views=0.0, likes=0.0, comments=0.0,
            stream=None, licensed=False, official_video=False, most_played_on=None,
        ),
        TrackRecord(
            artist="Nils Frahm", track="Says", album="Spaces",
            album_type=AlbumType.ALBUM, danceability=0.2, energy=0.3,
            liveness=0.85, acousticness=0.9, instrumentalness=1.0,
            valence=0.1, duration_min=8.5, views=None, likes=None, comments=None,
            stream=50_000_000.0, licensed=None, official_video=None,
            most_played_on="Spotify",
        ),
    ]


@pytest.fixture
def sample_store(sample_records):
    return RecordStore.load(sample_records)


@pytest.fixture
def csv_header():
    """Header as found in the Spotify/YouTube export."""
    return (
        ",Artist,Url_spotify,Track,Album,Album_type,Uri,Danceability,Energy,Key,"
        "Loudness,Speechiness,Acousticness,Instrumentalness,Liveness,Valence,Tempo,"
        "Duration_ms,Url_youtube,Title,Channel,Views,Likes,Comments,Description,"
        "Licensed,official_video,Stream,most_playedon"
    )


@pytest.fixture
def sample_csv(tmp_path, csv_header):
    """Three-row CSV export in the raw source layout."""
    rows = [
        "0,Gorillaz,u,Feel Good Inc.,Demon Days,album,x,0.818,0.705,6.0,-6.679,0.177,"
        "0.00836,0.00233,0.613,0.772,138.559,222640.0,y,Gorillaz - Feel Good Inc.,"
        "Gorillaz,693555221.0,6220896.0,169907.0,d,True,True,1040234854.0,Spotify",
        "1,Gorillaz,u,Rhinestone Eyes,Plastic Beach,album,x,0.676,0.703,8.0,-5.815,"
        "0.0302,0.0869,0.000687,0.0463,0.852,92.761,200173.0,y,Rhinestone Eyes,"
        "Gorillaz,72011645.0,1079128.0,31003.0,d,True,True,310083733.0,Spotify",
        "2,Daft Punk,u,Around the World,,compilation,x,0.956,0.795,7.0,-5.3,0.05,"
        "0.00329,0.889,0.0904,0.841,121.3,429000.0,y,Around the World,DP,,,,d,"
        "False,False,,",
    ]
    path = tmp_path / "tracks.csv"
    path.write_text("\n".join([csv_header] + rows) + "\n", encoding="utf-8")
    return path
