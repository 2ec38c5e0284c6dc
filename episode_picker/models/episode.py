"""Episode model and entry-time validation."""

from typing import Any, List

from pydantic import BaseModel, Field


class EpisodeModel(BaseModel):
    """Pydantic model for a single tracked episode."""
    
    episode_id: str = Field(..., description="Unique episode ID")
    season: int = Field(..., ge=1, description="Season number")
    episode_number: int = Field(..., ge=1, description="Episode number within the season")
    title: str = Field(default="", description="Episode title")
    runtime: int = Field(..., ge=1, description="Runtime in minutes")
    watched: bool = Field(default=False, description="Whether the episode has been watched")
    order: int = Field(default=0, description="Insertion order (display aid only)")


class NewEpisode(BaseModel):
    """Episode data as entered by the user or returned by a metadata lookup."""
    
    season: int = Field(..., ge=1, description="Season number")
    episode_number: int = Field(..., ge=1, description="Episode number within the season")
    title: str = Field(default="", description="Episode title (defaults to 'Episode N')")
    runtime: int = Field(..., ge=1, description="Runtime in minutes")


class ValidationResult(BaseModel):
    """Outcome of validating raw episode input."""
    
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


def _is_positive(value: Any) -> bool:
    try:
        return int(value) >= 1
    except (TypeError, ValueError):
        return False


def validate_episode(data: dict) -> ValidationResult:
    """
    Validate raw episode input before it reaches the library.
    
    Args:
        data: Mapping with "season", "episode_number" and "runtime" keys
        
    Returns:
        ValidationResult listing every problem found
    """
    errors = []
    
    if not _is_positive(data.get("season")):
        errors.append("Season must be a positive number")
    if not _is_positive(data.get("episode_number")):
        errors.append("Episode number must be a positive number")
    if not _is_positive(data.get("runtime")):
        errors.append("Runtime must be a positive number")
    
    return ValidationResult(is_valid=not errors, errors=errors)
