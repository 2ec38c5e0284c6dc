"""JSON-file storage for shows, watch history, settings and the queue session."""

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional

from pydantic import TypeAdapter, ValidationError

from ..constants.config import DEFAULT_CUSTOM_SERVICE_COLOR, STREAMING_SERVICES
from ..constants.paths import (
    LIBRARY_DIR,
    SHOWS_JSON_FILENAME,
    HISTORY_JSON_FILENAME,
    SETTINGS_JSON_FILENAME,
    SESSION_JSON_FILENAME,
)
from ..models.episode import EpisodeModel
from ..models.library import BackupModel, HistoryEntry, ImportResult
from ..models.queue import QueueSession
from ..models.settings import SettingsModel, StreamingService
from ..models.show import NewShow, ShowModel
from .formatting import normalize_title

logger = logging.getLogger(__name__)

_shows_adapter = TypeAdapter(List[ShowModel])
_history_adapter = TypeAdapter(List[HistoryEntry])


def generate_id() -> str:
    """Generate a unique record ID."""
    return uuid.uuid4().hex[:16]


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def builtin_streaming_services() -> List[StreamingService]:
    return [
        StreamingService(service_id=service_id, name=name, color=color)
        for service_id, name, color in STREAMING_SERVICES
    ]


class LibraryStore:
    """
    Persists the library as a handful of JSON files in one directory.

    Each record (shows, history, settings, session) lives in its own file and
    is read and rewritten whole. Reads of a missing file return the record's
    empty default.
    """

    def __init__(self, root: Path | str = LIBRARY_DIR):
        self.root = Path(root)

    # Raw JSON access

    def _load(self, filename: str) -> Optional[Any]:
        path = self.root / filename
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _save(self, filename: str, data: Any) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        with open(self.root / filename, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    # Shows

    def get_shows(self) -> List[ShowModel]:
        data = self._load(SHOWS_JSON_FILENAME)
        return _shows_adapter.validate_python(data) if data else []

    def save_shows(self, shows: List[ShowModel]) -> None:
        self._save(SHOWS_JSON_FILENAME, _shows_adapter.dump_python(shows, mode="json"))

    def get_show(self, show_id: str) -> Optional[ShowModel]:
        for show in self.get_shows():
            if show.show_id == show_id:
                return show
        return None

    def add_show(self, new_show: NewShow) -> ShowModel:
        """
        Add a show to the library, assigning IDs to it and its episodes.

        Episodes start unwatched and keep their input position as ``order``.
        """
        show = ShowModel(
            show_id=generate_id(),
            title=new_show.title,
            network=new_show.network,
            web_channel=new_show.web_channel,
            streaming_services=list(new_show.streaming_services),
            episodes=[
                EpisodeModel(
                    episode_id=generate_id(),
                    season=ep.season,
                    episode_number=ep.episode_number,
                    title=ep.title or f"Episode {ep.episode_number}",
                    runtime=ep.runtime,
                    watched=False,
                    order=index,
                )
                for index, ep in enumerate(new_show.episodes)
            ],
            created_at=_now(),
        )

        shows = self.get_shows()
        shows.append(show)
        self.save_shows(shows)
        logger.info("Added show %r with %d episodes", show.title, len(show.episodes))
        return show

    def update_show(self, show_id: str, **updates: Any) -> Optional[ShowModel]:
        """Apply field updates to a show. Returns the updated show, or None if not found."""
        shows = self.get_shows()
        for index, show in enumerate(shows):
            if show.show_id == show_id:
                shows[index] = ShowModel.model_validate({**show.model_dump(), **updates})
                self.save_shows(shows)
                return shows[index]
        return None

    def delete_show(self, show_id: str) -> bool:
        shows = self.get_shows()
        remaining = [show for show in shows if show.show_id != show_id]
        if len(remaining) == len(shows):
            return False
        self.save_shows(remaining)
        return True

    def set_episode_watched(self, show_id: str, episode_id: str, watched: bool) -> bool:
        """
        Set an episode's watched flag in the library.

        Marking an episode watched also records it in the watch history.

        Returns:
            True if the episode was found and updated
        """
        shows = self.get_shows()
        show = next((s for s in shows if s.show_id == show_id), None)
        if show is None:
            return False
        episode = show.get_episode(episode_id)
        if episode is None:
            return False

        episode.watched = watched
        self.save_shows(shows)

        if watched:
            self._add_to_history(show, episode)
        return True

    # History

    def get_history(self) -> List[HistoryEntry]:
        """Watch history, newest first."""
        data = self._load(HISTORY_JSON_FILENAME)
        return _history_adapter.validate_python(data) if data else []

    def _save_history(self, history: List[HistoryEntry]) -> None:
        self._save(HISTORY_JSON_FILENAME, _history_adapter.dump_python(history, mode="json"))

    def _add_to_history(self, show: ShowModel, episode: EpisodeModel) -> None:
        history = self.get_history()
        history.insert(0, HistoryEntry(
            history_id=generate_id(),
            show_id=show.show_id,
            show_title=show.title,
            episode_id=episode.episode_id,
            season=episode.season,
            episode_number=episode.episode_number,
            episode_title=episode.title,
            runtime=episode.runtime,
            watched_at=_now(),
        ))
        self._save_history(history)

    def clear_history(self) -> None:
        self._save_history([])

    # Settings

    def get_settings(self) -> SettingsModel:
        data = self._load(SETTINGS_JSON_FILENAME)
        return SettingsModel.model_validate(data) if data else SettingsModel()

    def save_settings(self, settings: SettingsModel) -> None:
        self._save(SETTINGS_JSON_FILENAME, settings.model_dump(mode="json"))

    def update_settings(self, **updates: Any) -> SettingsModel:
        settings = SettingsModel.model_validate({**self.get_settings().model_dump(), **updates})
        self.save_settings(settings)
        return settings

    def get_all_streaming_services(self) -> List[StreamingService]:
        """Built-in services followed by the user's custom ones."""
        return builtin_streaming_services() + self.get_settings().custom_services

    def add_custom_service(self, name: str, color: str = DEFAULT_CUSTOM_SERVICE_COLOR) -> StreamingService:
        """Add a user-defined streaming service (e.g. "Plex" or "My NAS")."""
        service = StreamingService(
            service_id=f"custom_{generate_id()}",
            name=name,
            color=color,
            is_custom=True,
        )
        settings = self.get_settings()
        self.update_settings(custom_services=[*settings.custom_services, service])
        return service

    def delete_custom_service(self, service_id: str) -> None:
        """Remove a custom service and unsubscribe from it."""
        settings = self.get_settings()
        self.update_settings(
            custom_services=[s for s in settings.custom_services if s.service_id != service_id],
            streaming_services=[s for s in settings.streaming_services if s != service_id],
        )

    # Queue session

    def get_session(self) -> Optional[QueueSession]:
        data = self._load(SESSION_JSON_FILENAME)
        return QueueSession.model_validate(data) if data else None

    def save_session(self, session: QueueSession) -> None:
        self._save(SESSION_JSON_FILENAME, session.model_dump(mode="json"))

    def clear_session(self) -> None:
        path = self.root / SESSION_JSON_FILENAME
        if path.exists():
            path.unlink()

    # Backup & restore

    def export_all_data(self) -> BackupModel:
        return BackupModel(
            exported_at=_now(),
            shows=self.get_shows(),
            history=self.get_history(),
            settings=self.get_settings(),
        )

    def import_all_data(self, data: Any, merge: bool = False) -> ImportResult:
        """
        Import a previously exported backup.

        Args:
            data: Parsed backup JSON
            merge: If True, add to the existing library; otherwise replace
                each record present in the backup

        Returns:
            ImportResult describing success or the reason for failure
        """
        if not isinstance(data, dict):
            return ImportResult(success=False, message="Invalid data format")

        if not any(data.get(key) for key in ("shows", "history", "settings")):
            return ImportResult(success=False, message="No valid data found in file")

        try:
            shows = _shows_adapter.validate_python(data["shows"]) if isinstance(data.get("shows"), list) else None
            history = _history_adapter.validate_python(data["history"]) if isinstance(data.get("history"), list) else None
            settings = data.get("settings") if isinstance(data.get("settings"), dict) else None
            if settings is not None:
                SettingsModel.model_validate(settings)
        except ValidationError as e:
            logger.warning("Rejected backup: %s", e)
            return ImportResult(success=False, message=f"Failed to import data: {e}")

        if merge:
            if shows is not None:
                existing = self.get_shows()
                existing_titles = {normalize_title(show.title) for show in existing}
                new_shows = [show for show in shows if normalize_title(show.title) not in existing_titles]
                self.save_shows(existing + new_shows)

            if history is not None:
                existing_history = self.get_history()
                existing_ids = {entry.history_id for entry in existing_history}
                new_history = [entry for entry in history if entry.history_id not in existing_ids]
                self._save_history(new_history + existing_history)

            if settings is not None:
                self.update_settings(**settings)
        else:
            if shows is not None:
                self.save_shows(shows)
            if history is not None:
                self._save_history(history)
            if settings is not None:
                self.save_settings(SettingsModel.model_validate(settings))

        return ImportResult(
            success=True,
            message="Data merged successfully" if merge else "Data imported successfully",
        )
