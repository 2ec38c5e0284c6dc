"""Display formatting and title normalization utilities."""

import re
import unicodedata
from typing import Optional, Sequence

from ..models.settings import SettingsModel, StreamingService
from ..models.show import ShowModel


def format_runtime(minutes: int) -> str:
    """Format minutes as a short duration like '45m', '2h' or '2h 30m'."""
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def format_episode_code(season: int, episode: int) -> str:
    """Format an episode code like 'S01E05'."""
    return f"S{season:02d}E{episode:02d}"


def strip_html(text: str) -> str:
    """Remove HTML tags from a metadata summary."""
    return re.sub(r"<[^>]*>", "", text)


def normalize_title(title: str) -> str:
    """Normalize a show title for duplicate detection."""
    # Normalize Unicode to NFC so composed and decomposed accents compare equal
    title = unicodedata.normalize("NFC", title)
    return title.strip().casefold()


def where_to_watch(
    show: ShowModel,
    settings: SettingsModel,
    services: Sequence[StreamingService],
) -> Optional[StreamingService]:
    """
    Choose the service to suggest for watching a show.
    
    Args:
        show: The show being watched
        settings: User settings holding the subscribed service IDs
        services: Known services (built-in and custom)
        
    Returns:
        The first of the show's services the user subscribes to; otherwise the
        show's first known service flagged ``not_subscribed``; otherwise None
    """
    if not show.streaming_services:
        return None
    
    by_id = {service.service_id: service for service in services}
    
    for service_id in show.streaming_services:
        if service_id in settings.streaming_services and service_id in by_id:
            return by_id[service_id]
    
    first = by_id.get(show.streaming_services[0])
    if first:
        return first.model_copy(update={"not_subscribed": True})
    
    return None
