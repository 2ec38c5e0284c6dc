"""Tests for progress and availability aggregates."""

from conftest import make_show
from episode_picker.processors.progress import (
    calculate_library_progress,
    calculate_show_progress,
    get_total_unwatched_runtime,
    get_unwatched_runtime,
    has_unwatched_episodes,
)


def test_show_progress_quarter_watched():
    show = make_show("a", [(1, 1, 30, True), (1, 2, 30, False), (1, 3, 30, False), (1, 4, 30, False)])
    progress = calculate_show_progress(show)
    assert (progress.watched, progress.total, progress.percentage) == (1, 4, 25)


def test_show_progress_rounds_to_nearest():
    show = make_show("a", [(1, 1, 30, True), (1, 2, 30, True), (1, 3, 30, False)])
    assert calculate_show_progress(show).percentage == 67


def test_show_progress_rounds_halves_up():
    show = make_show("a", [(1, n, 30, n == 1) for n in range(1, 9)])
    # 1/8 = 12.5%
    assert calculate_show_progress(show).percentage == 13


def test_show_progress_empty_show():
    progress = calculate_show_progress(make_show("empty", []))
    assert (progress.watched, progress.total, progress.percentage) == (0, 0, 0)


def test_library_progress(library):
    progress = calculate_library_progress(library)
    assert (progress.watched, progress.total, progress.percentage) == (2, 6, 33)


def test_unwatched_runtime(library):
    assert get_unwatched_runtime(library[0]) == 90
    assert get_unwatched_runtime(library[2]) == 0
    assert get_total_unwatched_runtime(library) == 134
    assert get_total_unwatched_runtime([]) == 0


def test_has_unwatched_episodes(library):
    assert has_unwatched_episodes(library)
    assert not has_unwatched_episodes(library[2:])
    assert not has_unwatched_episodes([])
    assert not has_unwatched_episodes([make_show("empty", [])])
