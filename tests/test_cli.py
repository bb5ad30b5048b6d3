"""Tests for the click CLI."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from studyflow.cli import main
from studyflow.config import Config, ConnectionSettings


@pytest.fixture
def run(tmp_path):
    """Invoke the CLI against a throwaway data file and settings file."""
    config = Config(timezone="UTC", data_file=str(tmp_path / "assignments.json"))
    settings = ConnectionSettings(tmp_path / "connections.json")
    runner = CliRunner()

    def _run(*args):
        with patch("studyflow.cli.load_config", return_value=config), patch(
            "studyflow.cli.ConnectionSettings", return_value=settings
        ):
            return runner.invoke(main, list(args))

    return _run


class TestAssignments:
    def test_add_and_list(self, run):
        result = run("add", "Essay draft", "--due", "2030-01-20", "--subject", "English")
        assert result.exit_code == 0
        assert "Added #1: Essay draft (due 2030-01-20 23:59)" in result.output

        result = run("list", "--json")
        data = json.loads(result.output)
        assert [a["title"] for a in data] == ["Essay draft"]
        assert data[0]["subject"] == "english"

    def test_add_with_time(self, run):
        result = run("add", "Lab", "--due", "2030-01-20T08:30", "--priority", "high")
        assert "(due 2030-01-20 08:30)" in result.output

    def test_add_invalid_date(self, run):
        result = run("add", "Lab", "--due", "next tuesday")
        assert result.exit_code == 1
        assert "invalid due date" in result.output

    def test_add_empty_title(self, run):
        result = run("add", " ", "--due", "2030-01-20")
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_done_toggles(self, run):
        run("add", "Lab", "--due", "2030-01-20")
        assert "completed: Lab" in run("done", "1").output
        assert "reopened: Lab" in run("done", "1").output

    def test_done_unknown(self, run):
        result = run("done", "7")
        assert result.exit_code == 1
        assert "no assignment #7" in result.output

    def test_clear_completed(self, run):
        run("add", "Lab", "--due", "2030-01-20")
        run("add", "Essay", "--due", "2030-01-21")
        run("done", "1")
        assert "Deleted 1 completed" in run("clear-completed").output
        assert [a["title"] for a in json.loads(run("list", "--json", "--all").output)] == ["Essay"]

    def test_list_filters(self, run):
        run("add", "Lab", "--due", "2030-01-20", "--subject", "science")
        run("add", "Essay", "--due", "2030-01-21", "--subject", "english")
        data = json.loads(run("list", "--json", "--subject", "science").output)
        assert [a["title"] for a in data] == ["Lab"]

    def test_stats_json(self, run):
        run("add", "Lab", "--due", "2030-01-20")
        run("add", "Essay", "--due", "2030-01-21")
        run("done", "2")
        data = json.loads(run("stats", "--json").output)
        assert data["total_active"] == 1
        assert data["completed"] == 1
        assert data["completion_percentage"] == 50.0

    def test_calendar_day(self, run):
        run("add", "Lab", "--due", "2030-01-20T08:30")
        assert "Lab" in run("calendar", "--date", "2030-01-20").output
        assert "Nothing due" in run("calendar", "--date", "2030-01-21").output

    def test_calendar_invalid_date(self, run):
        result = run("calendar", "--date", "someday")
        assert result.exit_code == 1
        assert "invalid date 'someday'" in result.output

    def test_tiers_json(self, run):
        run("add", "Far off", "--due", "2099-01-01")
        data = json.loads(run("tiers", "--json").output)
        assert list(data) == ["overdue", "high_priority", "coming_up", "long_term", "completed"]
        assert [a["title"] for a in data["long_term"]] == ["Far off"]


class TestSources:
    def test_sync_without_connections(self, run):
        result = run("sync")
        assert result.exit_code == 0
        assert "No sources connected" in result.output

    def test_canvas_needs_url(self, run):
        result = run("connect", "canvas", "--token", "abc")
        assert result.exit_code == 1
        assert "--url is required" in result.output

    def test_auto_sync_toggle(self, run, tmp_path):
        run("auto-sync", "classroom", "false")
        stored = ConnectionSettings(tmp_path / "connections.json").load("GOOGLE_CLASSROOM")
        assert stored.auto_sync is False
