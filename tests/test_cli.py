"""Tests for the epick command line."""

import json

import pytest
from click.testing import CliRunner

from episode_picker.cli import cli


@pytest.fixture
def run(tmp_path):
    runner = CliRunner()
    data_dir = tmp_path / "library"

    def invoke(*args, input=None):
        return runner.invoke(cli, ["--data-dir", str(data_dir), *args], input=input)

    return invoke


@pytest.fixture
def with_show(run):
    result = run("add-manual", "Home Videos", "--seasons", "1", "--episodes-per-season", "2", "--runtime", "30")
    assert result.exit_code == 0, result.output
    return result


def test_add_manual_and_list(run, with_show):
    assert "Added Home Videos" in with_show.output
    assert "2 episodes" in with_show.output

    result = run("list")
    assert result.exit_code == 0
    assert "Home Videos: 0/2 watched (0%), 1h left" in result.output


def test_add_manual_validates_input(run):
    result = run("add-manual", "Bad", "--seasons", "0", "--episodes-per-season", "2", "--runtime", "30")
    assert result.exit_code == 1
    assert "Season must be a positive number" in result.output


def test_list_empty_library(run):
    result = run("list")
    assert result.exit_code == 0
    assert "No shows yet" in result.output


def test_pick_and_mark(run, with_show):
    result = run("pick", "--mark")
    assert result.exit_code == 0
    assert "S01E01" in result.output
    assert "Marked as watched" in result.output

    result = run("pick")
    assert "S01E02" in result.output

    result = run("history")
    assert "Home Videos S01E01" in result.output


def test_pick_with_nothing_left(run):
    result = run("pick")
    assert result.exit_code == 0
    assert "No unwatched episodes available" in result.output


def test_mark_watched_unknown_episode(run, with_show):
    result = run("mark-watched", "missing", "missing")
    assert result.exit_code == 1


def test_queue_flow(run, with_show):
    result = run("queue", "build", "--minutes", "45")
    assert result.exit_code == 0
    assert "1. Home Videos S01E01" in result.output
    assert "2. Home Videos S01E02" in result.output
    assert "Total: 1h (Target: 45m)" in result.output

    result = run("queue", "status")
    assert "Now watching: Home Videos S01E01" in result.output
    assert "1 episodes remaining (30m)" in result.output

    result = run("queue", "watched")
    assert result.exit_code == 0
    assert "Now watching: Home Videos S01E02" in result.output

    result = run("queue", "skip")
    assert "Queue complete!" in result.output

    result = run("list")
    assert "1/2 watched (50%)" in result.output


def test_queue_status_without_queue(run):
    result = run("queue", "status")
    assert result.exit_code == 1
    assert "No queue yet" in result.output


def test_queue_uses_configured_duration(run, with_show):
    assert run("settings", "--duration", "20").exit_code == 0
    result = run("queue", "build")
    assert "Target: 20m" in result.output
    assert "2. " not in result.output


def test_settings_rejects_unknown_service(run):
    result = run("settings", "-s", "nosuchservice")
    assert result.exit_code == 1
    assert "Unknown service" in result.output


def test_custom_service_can_be_subscribed(run):
    result = run("services", "add", "Plex")
    assert result.exit_code == 0
    service_id = result.output.strip().split("(")[-1].rstrip(")")

    result = run("settings", "-s", service_id, "-s", "netflix")
    assert result.exit_code == 0
    assert "Streaming services: Plex, Netflix" in result.output


def test_export_and_import(run, with_show, tmp_path):
    backup = tmp_path / "backup.json"
    assert run("export", str(backup)).exit_code == 0
    assert json.loads(backup.read_text(encoding="utf-8"))["shows"][0]["title"] == "Home Videos"

    result = run("import", str(backup), "--merge")
    assert result.exit_code == 0
    assert "Data merged successfully" in result.output
    assert run("list").output.count("Home Videos:") == 1


def test_import_rejects_invalid_backup(run, tmp_path):
    backup = tmp_path / "bad.json"
    backup.write_text('{"version": 1}', encoding="utf-8")
    result = run("import", str(backup))
    assert result.exit_code == 1
    assert "No valid data found in file" in result.output


@pytest.mark.parametrize("minutes", ["0", "-30"])
def test_queue_build_rejects_non_positive_minutes(run, with_show, minutes):
    assert run("queue", "build", "--minutes", "90").exit_code == 0

    result = run("queue", "build", "--minutes", minutes)
    assert result.exit_code == 2
    assert "No unwatched episodes available" not in result.output

    # The queue in progress is kept
    result = run("queue", "status")
    assert result.exit_code == 0
    assert "Now watching: Home Videos S01E01" in result.output


def test_add_show_rejects_zero_concurrency(run):
    result = run("add-show", "169", "--concurrency", "0")
    assert result.exit_code == 2
    assert "Fetching" not in result.output
