"""TVmaze client for show search and episode lists."""

import asyncio
import logging
from collections import Counter
from typing import Any, Optional

import aiohttp

from ..constants.config import (
    DEFAULT_RUNTIME,
    REQUEST_TIMEOUT_SECONDS,
    TMDB_API_KEY,
    TVMAZE_BASE_URL,
)
from ..models.episode import NewEpisode
from ..models.metadata import ShowDetails, ShowSearchResult
from ..utils.formatting import strip_html
from .tmdb import get_streaming_availability

logger = logging.getLogger(__name__)


class MetadataLookupError(Exception):
    """Raised when TVmaze returns an unexpected response."""


def _show_runtime(show: dict) -> int:
    return show.get("runtime") or show.get("averageRuntime") or DEFAULT_RUNTIME


def parse_search_results(results: list[dict]) -> list[ShowSearchResult]:
    """
    Convert a TVmaze ``/search/shows`` response into search results.

    Args:
        results: Raw JSON list of {"score", "show"} items

    Returns:
        One ShowSearchResult per item, in TVmaze's relevance order
    """
    parsed = []
    for item in results:
        show = item["show"]
        premiered = show.get("premiered")
        summary = show.get("summary")
        image = show.get("image") or {}
        parsed.append(ShowSearchResult(
            tvmaze_id=show["id"],
            imdb_id=(show.get("externals") or {}).get("imdb"),
            name=show["name"],
            premiered=premiered.split("-")[0] if premiered else None,
            status=show.get("status"),
            runtime=_show_runtime(show),
            genres=show.get("genres") or [],
            image=image.get("medium"),
            summary=strip_html(summary) if summary else None,
        ))
    return parsed


def parse_episodes(episodes: list[dict], fallback_runtime: int = DEFAULT_RUNTIME) -> list[NewEpisode]:
    """
    Convert a TVmaze ``/shows/:id/episodes`` response into new episodes.

    Specials without a season or episode number cannot be placed in watch
    order and are skipped.
    """
    parsed = []
    for ep in episodes:
        season, number = ep.get("season"), ep.get("number")
        if not season or not number or season < 1 or number < 1:
            logger.debug("Skipping unnumbered episode %r", ep.get("name"))
            continue
        parsed.append(NewEpisode(
            season=season,
            episode_number=number,
            title=ep.get("name") or f"Episode {number}",
            runtime=ep.get("runtime") or fallback_runtime,
        ))
    return parsed


def parse_show_details(
    show: dict,
    episodes: list[dict],
    streaming_services: Optional[list[str]] = None,
) -> ShowDetails:
    """Combine TVmaze show and episode responses into ShowDetails."""
    parsed_episodes = parse_episodes(episodes, fallback_runtime=_show_runtime(show))
    seasons = Counter(ep.season for ep in parsed_episodes)

    return ShowDetails(
        tvmaze_id=show["id"],
        name=show["name"],
        runtime=_show_runtime(show),
        total_episodes=len(parsed_episodes),
        total_seasons=len(seasons),
        seasons=dict(sorted(seasons.items())),
        network=(show.get("network") or {}).get("name"),
        web_channel=(show.get("webChannel") or {}).get("name"),
        streaming_services=streaming_services or [],
        episodes=parsed_episodes,
    )


async def _get_json(session: aiohttp.ClientSession, url: str, params: Optional[dict] = None) -> Any:
    async with session.get(
        url,
        params=params,
        timeout=aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS),
    ) as response:
        if response.status != 200:
            raise MetadataLookupError(f"Failed to fetch {url}: HTTP {response.status}")
        return await response.json()


async def search_shows(session: aiohttp.ClientSession, query: str) -> list[ShowSearchResult]:
    """Search TVmaze for shows matching a title."""
    results = await _get_json(session, f"{TVMAZE_BASE_URL}/search/shows", params={"q": query})
    return parse_search_results(results)


async def get_episodes(session: aiohttp.ClientSession, tvmaze_id: int) -> list[NewEpisode]:
    """Fetch every episode of a TVmaze show."""
    episodes = await _get_json(session, f"{TVMAZE_BASE_URL}/shows/{tvmaze_id}/episodes")
    return parse_episodes(episodes)


async def get_show_details(
    session: aiohttp.ClientSession,
    tvmaze_id: int,
    tmdb_api_key: Optional[str] = TMDB_API_KEY,
) -> ShowDetails:
    """
    Fetch a show with its episodes and streaming availability.

    The show and its episode list are fetched concurrently. Availability
    comes from TMDB when an API key is configured.

    Args:
        session: aiohttp session
        tvmaze_id: TVmaze show ID
        tmdb_api_key: TMDB key, or None to skip the availability lookup

    Returns:
        ShowDetails ready to be turned into a library show

    Raises:
        MetadataLookupError: If either TVmaze request fails
    """
    show, episodes = await asyncio.gather(
        _get_json(session, f"{TVMAZE_BASE_URL}/shows/{tvmaze_id}"),
        _get_json(session, f"{TVMAZE_BASE_URL}/shows/{tvmaze_id}/episodes"),
    )

    streaming_services = await get_streaming_availability(session, show["name"], tmdb_api_key)

    return parse_show_details(show, episodes, streaming_services)


async def fetch_many_show_details(
    tvmaze_ids: list[int],
    concurrency: int,
    tmdb_api_key: Optional[str] = TMDB_API_KEY,
) -> list[ShowDetails]:
    """
    Fetch details for several shows with bounded concurrency.

    Shows that fail to load are logged and left out of the result.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be at least 1, got {concurrency}")

    semaphore = asyncio.Semaphore(concurrency)

    async def fetch_one(session: aiohttp.ClientSession, tvmaze_id: int) -> Optional[ShowDetails]:
        try:
            async with semaphore:
                return await get_show_details(session, tvmaze_id, tmdb_api_key)
        except (MetadataLookupError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.warning("Error fetching show %s: %s", tvmaze_id, e)
            return None

    async with aiohttp.ClientSession() as session:
        results = await asyncio.gather(*(fetch_one(session, tvmaze_id) for tvmaze_id in tvmaze_ids))

    return [details for details in results if details is not None]
