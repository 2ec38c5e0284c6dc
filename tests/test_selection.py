"""Tests for watch order, fair show selection and single-episode picks."""

import random
from collections import Counter

import pytest

from conftest import ScriptedRandom, make_show
from episode_picker.processors import selection
from episode_picker.processors.selection import (
    SelectionInvariantError,
    get_next_unwatched,
    pick_one,
    pick_random_show_with_unwatched,
    sorted_episodes,
)


class TestGetNextUnwatched:

    def test_returns_earliest_unwatched_in_season_order(self):
        show = make_show("mixed", [
            (2, 1, 30, False),
            (1, 2, 30, False),
            (1, 1, 30, True),
            (1, 10, 30, False),
        ])
        episode = get_next_unwatched(show)
        assert (episode.season, episode.episode_number) == (1, 2)

    def test_episode_number_sorts_numerically(self):
        show = make_show("numeric", [(1, 10, 30, False), (1, 9, 30, False)])
        assert get_next_unwatched(show).episode_number == 9

    def test_none_when_all_watched(self):
        show = make_show("done", [(1, 1, 30, True), (1, 2, 30, True)])
        assert get_next_unwatched(show) is None

    def test_none_for_show_without_episodes(self):
        assert get_next_unwatched(make_show("empty", [])) is None

    def test_does_not_reorder_or_mutate_show(self):
        show = make_show("mixed", [(2, 1, 30, False), (1, 1, 30, False)])
        before = show.model_dump()
        get_next_unwatched(show)
        assert show.model_dump() == before

    def test_duplicate_keys_keep_list_order(self):
        show = make_show("dupes", [(1, 1, 30, False), (1, 1, 40, False)])
        assert get_next_unwatched(show) is show.episodes[0]

        show.episodes[0].watched = True
        assert get_next_unwatched(show) is show.episodes[1]

    def test_sorted_episodes_is_canonical_order(self):
        show = make_show("mixed", [(3, 1, 30, False), (1, 2, 30, False), (1, 1, 30, False)])
        keys = [(ep.season, ep.episode_number) for ep in sorted_episodes(show)]
        assert keys == [(1, 1), (1, 2), (3, 1)]


class TestPickRandomShowWithUnwatched:

    def test_only_eligible_shows_are_candidates(self, library):
        rng = ScriptedRandom([1])
        show = pick_random_show_with_unwatched(library, rng)
        # "wire" is fully watched, leaving two candidates
        assert rng.calls == [2]
        assert show.show_id == "office"

    def test_none_when_nothing_unwatched(self):
        shows = [make_show("done", [(1, 1, 30, True)]), make_show("empty", [])]
        assert pick_random_show_with_unwatched(shows) is None

    def test_none_for_no_shows(self):
        assert pick_random_show_with_unwatched([]) is None

    def test_never_returns_finished_show(self, library):
        rng = random.Random(7)
        for _ in range(200):
            show = pick_random_show_with_unwatched(library, rng)
            assert show.show_id != "wire"

    def test_uniform_regardless_of_episode_count(self):
        shows = [
            make_show("short", [(1, 1, 10, False)]),
            make_show("long", [(1, n, 60, False) for n in range(1, 50)]),
            make_show("medium", [(1, n, 30, False) for n in range(1, 6)]),
        ]
        rng = random.Random(1234)
        trials = 3000
        counts = Counter(pick_random_show_with_unwatched(shows, rng).show_id for _ in range(trials))

        for show_id in ("short", "long", "medium"):
            assert counts[show_id] / trials == pytest.approx(1 / 3, abs=0.05)


class TestPickOne:

    def test_pairs_show_with_its_next_episode(self, library):
        pick = pick_one(library, ScriptedRandom([0]))
        assert pick.show.show_id == "lost"
        assert (pick.episode.season, pick.episode.episode_number) == (1, 2)
        assert pick.episode.watched is False

    def test_returns_objects_from_the_given_shows(self, library):
        pick = pick_one(library, ScriptedRandom([1]))
        assert pick.show is library[1]
        assert pick.episode in library[1].episodes

    def test_none_when_nothing_left(self):
        assert pick_one([make_show("done", [(1, 1, 30, True)])]) is None

    def test_always_picks_unwatched_episode(self, library):
        rng = random.Random(99)
        for _ in range(100):
            pick = pick_one(library, rng)
            assert not pick.episode.watched
            assert any(not ep.watched for ep in pick.show.episodes)

    def test_missing_next_episode_is_an_invariant_violation(self, library, monkeypatch):
        monkeypatch.setattr(selection, "get_next_unwatched", lambda show: None)
        with pytest.raises(SelectionInvariantError):
            pick_one(library, ScriptedRandom([0]))


class FalsyRandom(ScriptedRandom):
    """Scripted source that is falsy because it reports a length of zero."""

    def __len__(self) -> int:
        return 0


def test_falsy_random_source_is_still_used(library):
    rng = FalsyRandom([1])
    assert pick_random_show_with_unwatched(library, rng).show_id == "office"
    assert rng.calls == [2]
