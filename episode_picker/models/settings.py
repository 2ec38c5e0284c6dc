"""User settings and streaming service models."""

from typing import List

from pydantic import BaseModel, Field

from ..constants.config import DEFAULT_COUCH_POTATO_DURATION, DEFAULT_CUSTOM_SERVICE_COLOR


class StreamingService(BaseModel):
    """A streaming service a show can be watched on."""
    
    service_id: str = Field(..., description="Service ID (e.g. 'netflix' or 'custom_<id>')")
    name: str = Field(..., description="Display name")
    color: str = Field(default=DEFAULT_CUSTOM_SERVICE_COLOR, description="Badge color")
    is_custom: bool = Field(default=False, description="Whether the user defined this service")
    not_subscribed: bool = Field(
        default=False,
        description="Set by where-to-watch when the user does not subscribe to this service"
    )


class SettingsModel(BaseModel):
    """Pydantic model for user preferences."""
    
    couch_potato_duration: int = Field(
        default=DEFAULT_COUCH_POTATO_DURATION,
        ge=1,
        description="Target Couch Potato queue length in minutes"
    )
    streaming_services: List[str] = Field(
        default_factory=list,
        description="Service IDs the user subscribes to"
    )
    custom_services: List[StreamingService] = Field(
        default_factory=list,
        description="User-defined services (e.g. Plex, a local drive)"
    )
