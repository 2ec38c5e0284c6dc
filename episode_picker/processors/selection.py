"""Episode selection: watch order, fair show choice and single-episode picks."""

import random
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

from ..models.episode import EpisodeModel
from ..models.show import ShowModel


class RandomSource(Protocol):
    """Anything that can return a uniform index in ``[0, n)``.

    ``random.Random`` satisfies this; tests substitute a scripted sequence.
    """

    def randrange(self, n: int) -> int:
        ...


class SelectionInvariantError(AssertionError):
    """An eligible show turned out to have no next unwatched episode."""


@dataclass
class Pick:
    show: ShowModel
    episode: EpisodeModel


_default_rng = random.Random()


def sorted_episodes(show: ShowModel) -> List[EpisodeModel]:
    """Return the show's episodes in canonical watch order (season, then episode number)."""
    # sorted() is stable, so duplicate (season, episode) pairs keep list order
    return sorted(show.episodes, key=lambda ep: (ep.season, ep.episode_number))


def get_next_unwatched(show: ShowModel) -> Optional[EpisodeModel]:
    """
    Get the first unwatched episode of a show in watch order.

    Args:
        show: The show to scan (not modified)

    Returns:
        The next episode to watch, or None if the show has no episodes or all are watched
    """
    for episode in sorted_episodes(show):
        if not episode.watched:
            return episode
    return None


def has_unwatched(show: ShowModel) -> bool:
    return any(not ep.watched for ep in show.episodes)


def pick_random_show_with_unwatched(
    shows: Sequence[ShowModel],
    rng: Optional[RandomSource] = None,
) -> Optional[ShowModel]:
    """
    Pick a show uniformly at random among those with unwatched episodes.

    Every eligible show is equally likely regardless of how many episodes
    it has left or how long they run.

    Args:
        shows: Candidate shows
        rng: Random source (defaults to a module-level ``random.Random``)

    Returns:
        The chosen show, or None if no show has anything left to watch
    """
    eligible = [show for show in shows if has_unwatched(show)]
    if not eligible:
        return None

    if rng is None:
        rng = _default_rng
    return eligible[rng.randrange(len(eligible))]


def pick_one(
    shows: Sequence[ShowModel],
    rng: Optional[RandomSource] = None,
) -> Optional[Pick]:
    """
    Pick an episode to watch right now.

    Chooses a random eligible show, then that show's next unwatched episode.

    Returns:
        Pick of (show, episode), or None if nothing is left to watch

    Raises:
        SelectionInvariantError: If the chosen show has no next episode
    """
    show = pick_random_show_with_unwatched(shows, rng)
    if show is None:
        return None

    episode = get_next_unwatched(show)
    if episode is None:
        raise SelectionInvariantError(f"Show {show.show_id!r} was eligible but has no unwatched episode")

    return Pick(show=show, episode=episode)
