"""Show model for tracked series."""

from typing import List, Optional

from pydantic import BaseModel, Field

from .episode import EpisodeModel, NewEpisode


class ShowModel(BaseModel):
    """Pydantic model for a tracked show and its episodes."""
    
    show_id: str = Field(..., description="Unique show ID")
    title: str = Field(..., description="Show title")
    episodes: List[EpisodeModel] = Field(
        default_factory=list,
        description="Episodes in insertion order (watch order comes from season/episode number)"
    )
    network: Optional[str] = Field(default=None, description="Original network (e.g. 'AMC')")
    web_channel: Optional[str] = Field(default=None, description="Streaming platform (e.g. 'Netflix')")
    streaming_services: List[str] = Field(
        default_factory=list,
        description="Service IDs where the show can be streamed"
    )
    created_at: str = Field(default="", description="ISO timestamp when the show was added")
    
    def get_episode(self, episode_id: str) -> Optional[EpisodeModel]:
        """Find an episode by ID."""
        for episode in self.episodes:
            if episode.episode_id == episode_id:
                return episode
        return None


class NewShow(BaseModel):
    """Show data before it has been assigned IDs by the library."""
    
    title: str = Field(..., min_length=1, description="Show title")
    episodes: List[NewEpisode] = Field(default_factory=list, description="Episodes to add")
    network: Optional[str] = Field(default=None, description="Original network")
    web_channel: Optional[str] = Field(default=None, description="Streaming platform")
    streaming_services: List[str] = Field(default_factory=list, description="Streaming service IDs")
