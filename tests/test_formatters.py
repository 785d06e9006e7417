"""Tests for the formatters package."""

import csv
import io
import json

import pytest
from rich.console import Console

from track_insight.exceptions import InvalidConfigError
from track_insight.formatters import (
    CsvFormatter,
    JsonFormatter,
    RichFormatter,
    get_formatter,
    tabulate,
)
from track_insight.models import UNDEFINED, AlbumType, TrackRecord
from track_insight.queries import RankedTrack


class TestGetFormatter:
    def test_known_formatters(self):
        for name in ("rich", "json", "csv"):
            assert get_formatter(name) is not None

    def test_types(self):
        assert isinstance(get_formatter("json"), JsonFormatter)
        assert isinstance(get_formatter("csv"), CsvFormatter)
        assert isinstance(get_formatter("rich"), RichFormatter)

    def test_unknown(self):
        with pytest.raises(InvalidConfigError):
            get_formatter("xml")


class TestTabulate:
    """Result shapes flattened to rows."""

    def test_pairs(self):
        columns, rows = tabulate("top5_artists_by_stream", [("A", 300.0), ("B", 50.0)])
        assert columns == ("artist", "total_stream")
        assert rows == [("A", 300.0), ("B", 50.0)]

    def test_scalar(self):
        assert tabulate("total_track_count", 6) == (("tracks",), [(6,)])

    def test_single_tuple(self):
        assert tabulate("artist_with_most_likes", ("A", 10.0))[1] == [("A", 10.0)]

    def test_none_is_empty(self):
        assert tabulate("artist_with_most_likes", None)[1] == []

    def test_mapping(self):
        _, rows = tabulate("avg_valence_per_album", {"X": 0.5, "Y": 0.25})
        assert rows == [("X", 0.5), ("Y", 0.25)]

    def test_mapping_of_lists(self):
        columns, rows = tabulate("top3_per_platform", {"Spotify": [("a", 2.0), ("b", 1.0)], "Youtube": [("c", 3.0)]})
        assert columns == ("platform", "track", "stream")
        assert rows == [("Spotify", "a", 2.0), ("Spotify", "b", 1.0), ("Youtube", "c", 3.0)]

    def test_set_sorted(self):
        _, rows = tabulate("distinct_album_types", {AlbumType.SINGLE, AlbumType.ALBUM})
        assert rows == [("album",), ("single",)]

    def test_records(self):
        _, rows = tabulate("fully_instrumental", [TrackRecord(artist="A", track="T", album="X")])
        assert rows == [("A", "T", "X")]

    def test_ranked_tracks(self):
        columns, rows = tabulate("top3_streamed_in_album", [RankedTrack("t", 5.0, 1)])
        assert columns == ("track", "stream", "rank")
        assert rows == [("t", 5.0, 1)]

    def test_unknown_query_name(self):
        columns, rows = tabulate("adhoc", [("a", 1), ("b", 2)])
        assert columns == ("col1", "col2")


class TestJsonFormatter:
    def test_valid_json(self):
        data = json.loads(JsonFormatter().format("top5_artists_by_stream", [("A", 300.0)]))
        assert data == {"query": "top5_artists_by_stream", "rows": [{"artist": "A", "total_stream": 300.0}]}

    def test_undefined_is_null(self):
        data = json.loads(JsonFormatter().format("dance_energy_correlation", UNDEFINED))
        assert data["rows"] == [{"correlation": None}]

    def test_render_many(self, capsys):
        JsonFormatter().render_many({"total_track_count": 3, "count_official_video": 1})
        data = json.loads(capsys.readouterr().out)
        assert [d["query"] for d in data] == ["total_track_count", "count_official_video"]


class TestCsvFormatter:
    def test_header_and_rows(self):
        output = CsvFormatter().format("albums_over_5tracks_2Bviews", [("Big", 6, 3e9)])
        rows = list(csv.reader(io.StringIO(output)))
        assert rows[0] == ["album", "track_count", "total_views"]
        assert rows[1][0] == "Big"
        assert rows[1][1] == "6"

    def test_undefined_spelled_out(self):
        output = CsvFormatter().format("dance_energy_correlation", UNDEFINED)
        assert output.splitlines() == ["correlation", "undefined"]


class TestRichFormatter:
    def test_table_columns(self):
        table = RichFormatter().build_table("top5_artists_by_stream", [("A", 300.0)])
        assert [c.header for c in table.columns] == ["artist", "total_stream"]
        assert table.row_count == 1

    def test_numeric_columns_right_aligned(self):
        table = RichFormatter().build_table("top5_artists_by_stream", [("A", 300.0)])
        assert table.columns[0].justify == "left"
        assert table.columns[1].justify == "right"

    def test_empty_result_caption(self):
        table = RichFormatter().build_table("albums_over_1M_streams", [])
        assert table.row_count == 0
        assert "no rows" in str(table.caption)

    def test_bracketed_names_are_literal(self):
        """Square brackets in track names are text, not markup."""
        console = Console(record=True, width=120)
        table = RichFormatter().build_table(
            "tracks_with_artists", [("Song [feat. X]", "A"), ("Intro [/b]", "B")]
        )
        console.print(table)
        output = console.export_text()
        assert "Song [feat. X]" in output
        assert "Intro [/b]" in output
