"""
Facebook event link normalization
"""

import logging
import re
from typing import Iterable

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

DIRECT_EVENT_PATTERN = re.compile(r"facebook\.com/events/(\d+)")


def canonical_event_url(event_id: str) -> str:
    return f"https://www.facebook.com/events/{event_id}/"


def is_short_link(url: str, markers: Iterable[str]) -> bool:
    return any(marker in url for marker in markers)


async def normalize_facebook_url(
    raw_url: str,
    client: httpx.AsyncClient,
    resolver_endpoint: str = settings.FB_RESOLVER_ENDPOINT,
    short_link_markers: Iterable[str] = tuple(settings.FB_SHORT_LINK_MARKERS),
) -> str:
    """Canonicalize a user supplied Facebook link.

    Direct event links become ``https://www.facebook.com/events/<id>/``. Short
    links are expanded through the resolver endpoint. Whenever resolution is
    not possible the trimmed input is returned, this function never raises.
    """
    trimmed = (raw_url or "").strip()
    if not trimmed:
        return ""

    match = DIRECT_EVENT_PATTERN.search(trimmed)
    if match:
        return canonical_event_url(match.group(1))

    if not is_short_link(trimmed, short_link_markers):
        return trimmed

    if not resolver_endpoint:
        logger.warning(f"No link resolver configured, keeping {trimmed}")
        return trimmed

    try:
        response = await client.get(resolver_endpoint, params={"url": trimmed})
    except httpx.HTTPError as e:
        logger.warning(f"Link resolver request failed for {trimmed}: {e}")
        return trimmed

    if not response.is_success:
        logger.warning(f"Link resolver returned {response.status_code} for {trimmed}")
        return trimmed

    try:
        data = response.json()
    except ValueError:
        logger.warning(f"Link resolver returned invalid JSON for {trimmed}")
        return trimmed

    resolved = data.get("resolved") if isinstance(data, dict) else None
    if not resolved:
        return trimmed
    return str(resolved)
