"""Couch Potato queue models and playback session state."""

from typing import TYPE_CHECKING, List, Optional

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from ..utils.storage import LibraryStore


class ShowNotFoundError(KeyError):
    """Raised when a queue entry points at a show or episode no longer in the library."""


class QueueEntry(BaseModel):
    """One selected episode, denormalized for display."""

    show_id: str = Field(..., description="ID of the show")
    show_title: str = Field(..., description="Show title")
    episode_id: str = Field(..., description="ID of the episode")
    season: int = Field(..., description="Season number")
    episode_number: int = Field(..., description="Episode number")
    episode_title: str = Field(default="", description="Episode title")
    runtime: int = Field(..., description="Runtime in minutes")
    watched: bool = Field(
        default=False,
        description="Watched during this queue session (independent of the library flag)"
    )


class QueueModel(BaseModel):
    """A generated Couch Potato queue."""

    episodes: List[QueueEntry] = Field(default_factory=list, description="Entries in play order")
    total_runtime: int = Field(default=0, description="Sum of entry runtimes in minutes")
    target_runtime: int = Field(default=0, description="Requested duration in minutes")


class QueueSession(BaseModel):
    """
    Playback position within a queue.

    Sessions are never mutated in place: ``skip`` and ``mark_current_watched``
    return the advanced session and leave the receiver untouched.
    """

    queue: QueueModel = Field(default_factory=QueueModel)
    index: int = Field(default=0, ge=0, description="Index of the entry being watched")

    @property
    def current(self) -> Optional[QueueEntry]:
        """The entry being watched, or None once the queue is finished."""
        if self.index < len(self.queue.episodes):
            return self.queue.episodes[self.index]
        return None

    @property
    def remaining(self) -> List[QueueEntry]:
        """Entries after the current one."""
        return self.queue.episodes[self.index + 1:]

    @property
    def remaining_runtime(self) -> int:
        return sum(entry.runtime for entry in self.remaining)

    @property
    def is_complete(self) -> bool:
        return self.current is None

    def skip(self) -> "QueueSession":
        """Move past the current entry without marking anything watched."""
        if self.is_complete:
            return self
        return self.model_copy(update={"index": self.index + 1}, deep=True)

    def mark_current_watched(self, store: "LibraryStore") -> "QueueSession":
        """
        Mark the current entry watched in the library and advance.

        Args:
            store: Library the episode's watched flag is written to

        Returns:
            The advanced session

        Raises:
            ShowNotFoundError: If the entry's show or episode was removed
        """
        entry = self.current
        if entry is None:
            return self

        if not store.set_episode_watched(entry.show_id, entry.episode_id, True):
            raise ShowNotFoundError(f"{entry.show_title} episode {entry.episode_id} is no longer in the library")

        advanced = self.model_copy(deep=True)
        advanced.queue.episodes[self.index].watched = True
        advanced.index = self.index + 1
        return advanced
