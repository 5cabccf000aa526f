"""
Location autocomplete backed by the Mapy.cz suggest API
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.schemas.event import EventRecord, LocationSuggestion

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 3
SUGGESTION_TYPES = ("poi", "regional.address", "regional.street")


class CancellationToken:
    """Marks a suggestion query as superseded. Create a fresh one per query."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class LocationAutocomplete:
    """Queries points of interest, addresses and streets in parallel and merges them"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str = settings.MAPY_API_KEY,
        base_url: str = settings.MAPY_SUGGEST_URL,
        locality: str = settings.MAPY_LOCALITY,
        prefer_bbox: str = settings.MAPY_PREFER_BBOX,
        limit: int = 5,
    ):
        self.client = client
        self.api_key = api_key
        self.base_url = base_url
        self.locality = locality
        self.prefer_bbox = prefer_bbox
        self.limit = limit
        self._current: Optional[CancellationToken] = None

    def _params(self, query: str, suggestion_type: str) -> Dict[str, Any]:
        return {
            "lang": "cs",
            "apikey": self.api_key,
            "query": query,
            "limit": self.limit,
            "type": suggestion_type,
            "locality": self.locality,
            "preferBBox": self.prefer_bbox,
        }

    async def _fetch(self, query: str, suggestion_type: str) -> List[Dict[str, Any]]:
        response = await self.client.get(self.base_url, params=self._params(query, suggestion_type))
        response.raise_for_status()
        items = response.json().get("items")
        return items if isinstance(items, list) else []

    async def suggest(
        self,
        query: str,
        token: Optional[CancellationToken] = None,
    ) -> List[LocationSuggestion]:
        """Return suggestions for ``query``.

        Queries shorter than three characters once trimmed return an empty
        list without a request. A newer call cancels the token of the call
        still in flight, and a cancelled call returns an empty list once its
        responses arrive. Request failures also give an empty list.
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        token = token or CancellationToken()
        if self._current is not None and self._current is not token:
            self._current.cancel()
        self._current = token

        try:
            results = await asyncio.gather(
                *(self._fetch(query, suggestion_type) for suggestion_type in SUGGESTION_TYPES)
            )
        except (httpx.HTTPError, ValueError, AttributeError) as e:
            logger.error(f"Error fetching suggestions for '{query}': {e}")
            return []
        finally:
            if self._current is token:
                self._current = None

        if token.cancelled:
            logger.debug(f"Discarding superseded suggestions for '{query}'")
            return []

        suggestions: List[LocationSuggestion] = []
        for items in results:
            for item in items:
                try:
                    suggestions.append(LocationSuggestion.model_validate(item))
                except ValueError:
                    logger.warning(f"Skipping malformed suggestion: {item}")
        return suggestions


class AutocompleteSessions:
    """One autocomplete adapter per client, so a client's newer query supersedes its older one"""

    def __init__(self, client: httpx.AsyncClient, max_sessions: int = 1024):
        self.client = client
        self.max_sessions = max_sessions
        self._sessions: "OrderedDict[str, LocationAutocomplete]" = OrderedDict()

    def for_client(self, client_key: str) -> LocationAutocomplete:
        session = self._sessions.pop(client_key, None)
        if session is None:
            session = LocationAutocomplete(self.client)
        self._sessions[client_key] = session
        while len(self._sessions) > self.max_sessions:
            self._sessions.popitem(last=False)
        return session


def clean_place_name(suggestion: LocationSuggestion) -> str:
    raw = suggestion.name or suggestion.label or ""
    return raw.split("(")[0].strip()


def apply_location(record: EventRecord, suggestion: LocationSuggestion) -> EventRecord:
    """Copy a picked suggestion onto a record, resolving its coordinates"""
    lat = suggestion.position.lat if suggestion.position else 0
    lng = suggestion.position.lon if suggestion.position else 0
    return record.model_copy(update={
        "location": clean_place_name(suggestion),
        "lat": lat,
        "lng": lng,
    })


def clear_location(record: EventRecord, text: str) -> EventRecord:
    """Typed location text is unresolved until a suggestion is picked"""
    return record.model_copy(update={"location": text, "lat": 0, "lng": 0})
