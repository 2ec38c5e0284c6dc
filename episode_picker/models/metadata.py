"""Pydantic models for show metadata lookups."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .episode import NewEpisode
from .show import NewShow


class ShowSearchResult(BaseModel):
    """A show returned by a title search."""
    
    tvmaze_id: int = Field(description="TVmaze show ID")
    imdb_id: Optional[str] = Field(default=None, description="IMDb ID if known")
    name: str = Field(description="Show name")
    premiered: Optional[str] = Field(default=None, description="Premiere year")
    status: Optional[str] = Field(default=None, description="Running, Ended, ...")
    runtime: int = Field(description="Typical episode runtime in minutes")
    genres: List[str] = Field(default_factory=list)
    image: Optional[str] = Field(default=None, description="Poster URL (medium size)")
    summary: Optional[str] = Field(default=None, description="Plain-text summary")


class ShowDetails(BaseModel):
    """Full show metadata with its episode list."""
    
    tvmaze_id: int = Field(description="TVmaze show ID")
    name: str = Field(description="Show name")
    runtime: int = Field(description="Typical episode runtime in minutes")
    total_episodes: int = Field(description="Number of episodes")
    total_seasons: int = Field(description="Number of distinct seasons")
    seasons: Dict[int, int] = Field(
        default_factory=dict,
        description="Episode count per season number"
    )
    network: Optional[str] = Field(default=None, description="Original network")
    web_channel: Optional[str] = Field(default=None, description="Streaming platform")
    streaming_services: List[str] = Field(default_factory=list)
    episodes: List[NewEpisode] = Field(default_factory=list)
    
    def to_new_show(self) -> NewShow:
        """Convert to a NewShow ready to be added to the library."""
        return NewShow(
            title=self.name,
            episodes=self.episodes,
            network=self.network,
            web_channel=self.web_channel,
            streaming_services=self.streaming_services,
        )
