"""Couch Potato queue generation."""

import logging
from typing import Optional, Sequence

from ..models.queue import QueueEntry, QueueModel
from ..models.show import ShowModel
from .selection import RandomSource, pick_one

logger = logging.getLogger(__name__)


def build_queue(
    target_minutes: int,
    shows: Sequence[ShowModel],
    rng: Optional[RandomSource] = None,
) -> QueueModel:
    """
    Build a queue of unwatched episodes that fills a target duration.
    
    Episodes are picked one at a time with ``pick_one`` against a private
    deep copy of ``shows``; each pick is marked watched in that copy only, so
    the caller's shows are never modified. Picking stops once the running
    total reaches the target or nothing unwatched remains. The last episode
    is kept whole, so the total may overshoot the target.
    
    Args:
        target_minutes: Requested queue length in minutes
        shows: Library shows (read-only)
        rng: Random source passed through to show selection
        
    Returns:
        QueueModel with the picked entries, their total runtime and the target
    """
    snapshot = [show.model_copy(deep=True) for show in shows]
    
    entries: list[QueueEntry] = []
    total_runtime = 0
    
    while total_runtime < target_minutes:
        pick = pick_one(snapshot, rng)
        if pick is None:
            logger.debug("Ran out of unwatched episodes at %d of %d minutes", total_runtime, target_minutes)
            break
        
        show, episode = pick.show, pick.episode
        entries.append(QueueEntry(
            show_id=show.show_id,
            show_title=show.title,
            episode_id=episode.episode_id,
            season=episode.season,
            episode_number=episode.episode_number,
            episode_title=episode.title,
            runtime=episode.runtime,
        ))
        total_runtime += episode.runtime
        
        # Only the snapshot copy is touched
        episode.watched = True
    
    logger.debug("Built queue of %d episodes (%d/%d minutes)", len(entries), total_runtime, target_minutes)
    
    return QueueModel(
        episodes=entries,
        total_runtime=total_runtime,
        target_runtime=target_minutes,
    )
