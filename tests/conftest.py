"""Shared fixtures and builders for the episode picker tests."""

from typing import Iterable

import pytest

from episode_picker.models.episode import EpisodeModel
from episode_picker.models.show import ShowModel
from episode_picker.utils.storage import LibraryStore


class ScriptedRandom:
    """Random source that returns a fixed sequence of indexes."""

    def __init__(self, indexes: Iterable[int]):
        self.indexes = list(indexes)
        self.calls: list[int] = []

    def randrange(self, n: int) -> int:
        self.calls.append(n)
        index = self.indexes.pop(0)
        assert 0 <= index < n, f"scripted index {index} out of range for {n} choices"
        return index


def make_show(
    show_id: str,
    episodes: list[tuple[int, int, int, bool]],
    title: str | None = None,
) -> ShowModel:
    """Build a show from (season, episode_number, runtime, watched) tuples."""
    return ShowModel(
        show_id=show_id,
        title=title or show_id.title(),
        episodes=[
            EpisodeModel(
                episode_id=f"{show_id}-s{season}e{number}-{index}",
                season=season,
                episode_number=number,
                title=f"Episode {number}",
                runtime=runtime,
                watched=watched,
                order=index,
            )
            for index, (season, number, runtime, watched) in enumerate(episodes)
        ],
    )


@pytest.fixture
def store(tmp_path) -> LibraryStore:
    return LibraryStore(tmp_path / "library")


@pytest.fixture
def library() -> list[ShowModel]:
    """Three shows: one half watched, one untouched, one finished."""
    return [
        make_show("lost", [(1, 1, 45, True), (1, 2, 45, False), (2, 1, 45, False)]),
        make_show("office", [(1, 1, 22, False), (1, 2, 22, False)]),
        make_show("wire", [(1, 1, 60, True)]),
    ]
