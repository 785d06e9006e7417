"""Tests for the track-insight command line."""

import json

import pytest
from typer.testing import CliRunner

from track_insight.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TRACK_INSIGHT_OUTPUT_FORMAT", raising=False)


class TestList:
    def test_lists_queries(self):
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 0
        assert "top3_per_platform" in result.stdout
        assert "dance_energy_correlation" in result.stdout


class TestRun:
    def test_json_output(self, sample_csv):
        result = runner.invoke(app, ["run", "top5_artists_by_stream", "--data", str(sample_csv), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["rows"][0] == {"artist": "Gorillaz", "total_stream": 1_040_234_854.0 + 310_083_733.0}

    def test_csv_output(self, sample_csv):
        result = runner.invoke(app, ["run", "total_track_count", "--data", str(sample_csv), "--format", "csv"])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["tracks", "3"]

    def test_album_query(self, sample_csv):
        args = ["run", "tracks_in_album", "--data", str(sample_csv), "--album", "Demon Days", "--format", "csv"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert "Feel Good Inc." in result.stdout

    def test_album_query_without_album(self, sample_csv):
        result = runner.invoke(app, ["run", "tracks_in_album", "--data", str(sample_csv)])
        assert result.exit_code == 1

    def test_unknown_query(self, sample_csv):
        result = runner.invoke(app, ["run", "top_genres", "--data", str(sample_csv)])
        assert result.exit_code == 1

    def test_unknown_format(self, sample_csv):
        result = runner.invoke(app, ["run", "total_track_count", "--data", str(sample_csv), "--format", "xml"])
        assert result.exit_code == 1

    def test_rich_output(self, sample_csv):
        result = runner.invoke(app, ["run", "top10_most_viewed", "--data", str(sample_csv)])
        assert result.exit_code == 0
        assert "Feel Good Inc." in result.stdout

    def test_limit(self, sample_csv):
        args = ["run", "top10_most_viewed", "--data", str(sample_csv), "--limit", "1", "--format", "csv"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert len(lines) == 2
        assert lines[1].startswith("Feel Good Inc.,")

    def test_limit_on_uncapped_query(self, sample_csv):
        args = ["run", "total_track_count", "--data", str(sample_csv), "--limit", "1"]
        result = runner.invoke(app, args)
        assert result.exit_code == 1


class TestRunAll:
    def test_json(self, sample_csv):
        result = runner.invoke(app, ["run-all", "--data", str(sample_csv), "--format", "json", "--workers", "2"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert len(data) == 18

    def test_with_album(self, sample_csv):
        args = ["run-all", "--data", str(sample_csv), "--format", "json", "--album", "Demon Days"]
        result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert len(json.loads(result.stdout)) == 20


class TestSummary:
    def test_summary(self, sample_csv):
        result = runner.invoke(app, ["summary", "--data", str(sample_csv)])
        assert result.exit_code == 0
        assert "Tracks" in result.stdout
        assert "album, compilation" in result.stdout


class TestConfigOption:
    def test_config_file_sets_format(self, tmp_path, sample_csv):
        config = tmp_path / "custom.toml"
        config.write_text('output_format = "csv"\n')
        result = runner.invoke(app, ["--config", str(config), "run", "total_track_count", "--data", str(sample_csv)])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["tracks", "3"]
