"""Read-only progress and availability aggregates."""

import math
from typing import Sequence

from pydantic import BaseModel

from ..models.show import ShowModel


class ShowProgress(BaseModel):
    watched: int = 0
    total: int = 0
    percentage: int = 0


def _percentage(watched: int, total: int) -> int:
    if total == 0:
        return 0
    # Halves round up, unlike round()'s banker's rounding
    return math.floor(watched / total * 100 + 0.5)


def calculate_show_progress(show: ShowModel) -> ShowProgress:
    """Count watched episodes of a show and the completion percentage."""
    total = len(show.episodes)
    watched = sum(1 for ep in show.episodes if ep.watched)
    return ShowProgress(watched=watched, total=total, percentage=_percentage(watched, total))


def calculate_library_progress(shows: Sequence[ShowModel]) -> ShowProgress:
    """Progress across every episode of every show."""
    total = sum(len(show.episodes) for show in shows)
    watched = sum(1 for show in shows for ep in show.episodes if ep.watched)
    return ShowProgress(watched=watched, total=total, percentage=_percentage(watched, total))


def get_unwatched_runtime(show: ShowModel) -> int:
    """Total runtime in minutes of a show's unwatched episodes."""
    return sum(ep.runtime for ep in show.episodes if not ep.watched)


def get_total_unwatched_runtime(shows: Sequence[ShowModel]) -> int:
    return sum(get_unwatched_runtime(show) for show in shows)


def has_unwatched_episodes(shows: Sequence[ShowModel]) -> bool:
    """Whether any show has at least one unwatched episode."""
    return any(not ep.watched for show in shows for ep in show.episodes)
