"""Tests for the command line interface."""

import re

import pytest
import yaml
from typer.testing import CliRunner

from club_ladder import __version__, cli
from club_ladder.cli import app

runner = CliRunner()
BOOKING_ID = re.compile(r"Match booked ([0-9a-f-]{36})")


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep table cells on one line."""
    monkeypatch.setattr(cli.console, "width", 200)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "club.yaml"
    path.write_text(
        yaml.safe_dump(
            {
                "club_name": "Testklubben",
                "storage": {"database_path": str(tmp_path / "club.duckdb")},
                "booking": {"slot_minutes": 90},
            }
        )
    )
    return path


def invoke(*args: str):
    return runner.invoke(app, list(args))


class TestInfoCommands:
    """Tests for commands that do not touch the store."""

    def test_version(self):
        """Test --version prints the package version."""
        result = invoke("--version")

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_info(self):
        """Test info lists example commands."""
        result = invoke("info")

        assert result.exit_code == 0
        assert "club-ladder standings --as anna" in result.output

    def test_validate(self, config_file):
        """Test a valid file is summarised."""
        result = invoke("validate", str(config_file))

        assert result.exit_code == 0
        assert "Configuration is valid!" in result.output
        assert "Testklubben" in result.output
        assert "Slot minutes: 90" in result.output

    def test_validate_invalid(self, tmp_path):
        """Test an out-of-range setting fails validation."""
        path = tmp_path / "bad.yaml"
        path.write_text("ladder:\n  max_challenge_distance: 0\n")

        result = invoke("validate", str(path))

        assert result.exit_code == 1
        assert "Configuration Error" in result.output

    def test_validate_missing_file(self, tmp_path):
        """Test a missing file exits with an error."""
        result = invoke("validate", str(tmp_path / "nope.yaml"))

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output


class TestLadderFlow:
    """Tests for a full season run through the CLI."""

    def setup_season(self, config_file):
        config = str(config_file)
        for uid in ["anna", "bertil", "cecilia"]:
            assert invoke("add-user", uid, f"{uid}@example.com", "-c", config).exit_code == 0
        assert invoke("create-ladder", "Stegen 2026", "--year", "2026", "-c", config).exit_code == 0
        for uid in ["anna", "bertil", "cecilia"]:
            assert invoke("join", uid, "-c", config).exit_code == 0
        return config

    def test_challenge_and_report(self, config_file):
        """Test a challenge can be booked, reported and listed."""
        config = self.setup_season(config_file)

        standings = invoke("standings", "--as", "cecilia", "-c", config)
        assert standings.exit_code == 0
        assert "Stegen 2026" in standings.output

        booked = invoke("challenge", "cecilia", "anna", "--start", "2026-05-01T18:00", "-c", config)
        assert booked.exit_code == 0
        booking_id = BOOKING_ID.search(booked.output).group(1)

        reported = invoke("report", booking_id, "cecilia", "--comment", "6-4 6-4", "-c", config)
        assert reported.exit_code == 0
        assert "Result reported" in reported.output
        assert "1–0" in reported.output

        listed = invoke("matches", "-c", config)
        assert listed.exit_code == 0
        assert "completed" in listed.output

    def test_rejected_challenge_exits_with_error(self, config_file):
        """Test challenging downward exits with code 1."""
        config = self.setup_season(config_file)

        result = invoke("challenge", "anna", "cecilia", "--start", "2026-05-01T18:00", "-c", config)

        assert result.exit_code == 1
        assert "Ladder Error" in result.output

    def test_cancel(self, config_file):
        """Test a planned match can be cancelled."""
        config = self.setup_season(config_file)
        booked = invoke("challenge", "bertil", "anna", "--start", "2026-05-02T10:00", "-c", config)
        booking_id = BOOKING_ID.search(booked.output).group(1)

        result = invoke("cancel", booking_id, "-c", config)

        assert result.exit_code == 0
        assert "Match cancelled" in result.output

    def test_bad_start_time(self, config_file):
        """Test an unparseable start time is a usage error."""
        config = self.setup_season(config_file)

        result = invoke("challenge", "bertil", "anna", "--start", "tomorrow", "-c", config)

        assert result.exit_code == 2

    def test_duplicate_user_exits_with_error(self, config_file):
        """Test registering a taken uid prints a ladder error instead of crashing."""
        config = self.setup_season(config_file)

        result = invoke("add-user", "anna", "anna2@example.com", "-c", config)

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "already exists" in result.output

    def test_bracketed_text_is_shown_literally(self, config_file):
        """Test names and comments containing brackets are printed as typed."""
        config = str(config_file)
        invoke("add-user", "anna", "anna@example.com", "--name", "Anna [/] Berg", "-c", config)
        invoke("add-user", "bo", "bo@example.com", "--name", "Bo [bold]", "-c", config)
        invoke("create-ladder", "Stegen [2026]", "--year", "2026", "-c", config)
        invoke("join", "anna", "-c", config)
        invoke("join", "bo", "-c", config)

        standings = invoke("standings", "--as", "bo", "-c", config)
        assert standings.exit_code == 0
        assert "Anna [/] Berg" in standings.output
        assert "Bo [bold]" in standings.output

        booked = invoke("challenge", "bo", "anna", "--start", "2026-05-01T18:00", "-c", config)
        booking_id = BOOKING_ID.search(booked.output).group(1)
        invoke("report", booking_id, "bo", "--comment", "[/] walkover", "-c", config)

        listed = invoke("matches", "-c", config)
        assert listed.exit_code == 0
        assert "[/] walkover" in listed.output

    def test_standings_without_ladder(self, config_file):
        """Test commands needing a ladder fail cleanly when none exists."""
        result = invoke("standings", "-c", str(config_file))

        assert result.exit_code == 1
        assert "There is no active ladder" in result.output
