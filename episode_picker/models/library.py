"""Watch history and backup models."""

from typing import List

from pydantic import BaseModel, Field

from ..constants.config import BACKUP_VERSION
from .settings import SettingsModel
from .show import ShowModel


class HistoryEntry(BaseModel):
    """A record of one episode being marked watched."""
    
    history_id: str = Field(..., description="Unique history entry ID")
    show_id: str = Field(..., description="ID of the show")
    show_title: str = Field(..., description="Show title at the time of watching")
    episode_id: str = Field(..., description="ID of the episode")
    season: int = Field(..., description="Season number")
    episode_number: int = Field(..., description="Episode number")
    episode_title: str = Field(default="", description="Episode title")
    runtime: int = Field(..., description="Runtime in minutes")
    watched_at: str = Field(..., description="ISO timestamp")


class BackupModel(BaseModel):
    """Complete export of the library."""
    
    version: int = Field(default=BACKUP_VERSION, description="Backup format version")
    exported_at: str = Field(..., description="ISO timestamp of the export")
    shows: List[ShowModel] = Field(default_factory=list)
    history: List[HistoryEntry] = Field(default_factory=list)
    settings: SettingsModel = Field(default_factory=SettingsModel)


class ImportResult(BaseModel):
    """Outcome of importing a backup."""
    
    success: bool
    message: str
