"""TMDB client for streaming availability (watch providers powered by JustWatch)."""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..constants.config import (
    REQUEST_TIMEOUT_SECONDS,
    TMDB_BASE_URL,
    TMDB_PROVIDER_MAP,
    TMDB_WATCH_REGION,
)

logger = logging.getLogger(__name__)


def choose_tmdb_match(results: list[dict], show_name: str) -> Optional[int]:
    """Prefer a case-insensitive exact name match, else the first result."""
    if not results:
        return None
    wanted = show_name.casefold()
    for result in results:
        if (result.get("name") or "").casefold() == wanted:
            return result["id"]
    return results[0]["id"]


def map_providers(providers_data: dict, region: str = TMDB_WATCH_REGION) -> list[str]:
    """
    Map a TMDB watch-providers response to internal service IDs.

    Subscription (``flatrate``) providers come first, then free ones.
    Unknown providers are dropped and each service appears once.
    """
    regional = (providers_data.get("results") or {}).get(region)
    if not regional:
        return []

    services: list[str] = []
    for provider in [*(regional.get("flatrate") or []), *(regional.get("free") or [])]:
        service_id = TMDB_PROVIDER_MAP.get(provider.get("provider_id"))
        if service_id and service_id not in services:
            services.append(service_id)
    return services


async def get_streaming_availability(
    session: aiohttp.ClientSession,
    show_name: str,
    api_key: Optional[str],
) -> list[str]:
    """
    Look up where a show can be streamed.

    Availability is a nice-to-have, so any failure is logged and an empty
    list returned rather than interrupting a show import.

    Args:
        session: aiohttp session
        show_name: Show name to search TMDB for
        api_key: TMDB API key (None disables the lookup)

    Returns:
        Internal streaming service IDs
    """
    if not api_key:
        logger.debug("No TMDB API key configured, skipping availability for %r", show_name)
        return []

    timeout = aiohttp.ClientTimeout(total=REQUEST_TIMEOUT_SECONDS)

    try:
        async with session.get(
            f"{TMDB_BASE_URL}/search/tv",
            params={"api_key": api_key, "query": show_name},
            timeout=timeout,
        ) as response:
            if response.status != 200:
                logger.warning("TMDB search failed for %r: HTTP %s", show_name, response.status)
                return []
            search = await response.json()

        tmdb_id = choose_tmdb_match(search.get("results") or [], show_name)
        if tmdb_id is None:
            logger.info("Could not find show on TMDB: %s", show_name)
            return []

        async with session.get(
            f"{TMDB_BASE_URL}/tv/{tmdb_id}/watch/providers",
            params={"api_key": api_key},
            timeout=timeout,
        ) as response:
            if response.status != 200:
                logger.warning("TMDB providers failed for %r: HTTP %s", show_name, response.status)
                return []
            providers = await response.json()
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
        # ValueError covers malformed JSON bodies
        logger.warning("Error fetching streaming availability for %r: %s", show_name, e)
        return []

    return map_providers(providers)
