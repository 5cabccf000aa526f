"""
Tests for the location autocomplete adapter
"""

import asyncio

import httpx

from app.schemas.event import LocationSuggestion, Position
from app.services.location_service import (
    AutocompleteSessions,
    CancellationToken,
    LocationAutocomplete,
    apply_location,
    clear_location,
)

from conftest import make_event

SUGGEST_URL = "https://api.test/v1/suggest"


def item_for(request):
    params = request.url.params
    return {
        "name": f"{params['query']} ({params['type']})",
        "label": params["type"],
        "position": {"lat": 50.35, "lon": 13.79},
    }


def suggest(query, handler):
    requests = []

    def recording(request):
        requests.append(request)
        return handler(request)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(recording)) as client:
            adapter = LocationAutocomplete(client, api_key="key", base_url=SUGGEST_URL)
            return await adapter.suggest(query)

    return asyncio.run(scenario()), requests


def test_short_query_makes_no_request():
    results, requests = suggest("Lo", lambda r: httpx.Response(200, json={"items": []}))
    assert results == []
    assert requests == []


def test_whitespace_does_not_count_towards_query_length():
    results, requests = suggest("  a  ", lambda r: httpx.Response(200, json={"items": []}))
    assert results == []
    assert requests == []


def test_query_is_sent_trimmed():
    _, requests = suggest("  Louny ", lambda r: httpx.Response(200, json={"items": []}))
    assert [r.url.params["query"] for r in requests] == ["Louny"] * 3


def test_results_merged_in_category_order():
    results, requests = suggest("Louny", lambda r: httpx.Response(200, json={"items": [item_for(r)]}))

    assert [s.label for s in results] == ["poi", "regional.address", "regional.street"]
    assert len(requests) == 3
    params = requests[0].url.params
    assert params["lang"] == "cs"
    assert params["apikey"] == "key"
    assert params["limit"] == "5"
    assert params["locality"].startswith("BOX(")
    assert "preferBBox" in params


def test_missing_items_give_empty_list():
    results, _ = suggest("Louny", lambda r: httpx.Response(200, json={}))
    assert results == []


def test_request_failure_gives_empty_list():
    def handler(request):
        if request.url.params["type"] == "regional.street":
            return httpx.Response(503)
        return httpx.Response(200, json={"items": [item_for(request)]})

    results, _ = suggest("Louny", handler)
    assert results == []


def test_network_error_gives_empty_list():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    results, _ = suggest("Louny", handler)
    assert results == []


def test_superseded_query_is_discarded():
    """A newer query cancels the one still in flight and its late result is dropped"""

    async def scenario():
        release = asyncio.Event()

        async def handler(request):
            if request.url.params["query"] == "Lou":
                await release.wait()
            return httpx.Response(200, json={"items": [item_for(request)]})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            adapter = LocationAutocomplete(client, api_key="key", base_url=SUGGEST_URL)
            first_token = CancellationToken()
            first = asyncio.create_task(adapter.suggest("Lou", first_token))
            await asyncio.sleep(0)

            second = await adapter.suggest("Louny")
            release.set()
            return await first, second, first_token.cancelled

    first, second, first_cancelled = asyncio.run(scenario())
    assert first_cancelled
    assert first == []
    assert len(second) == 3
    assert second[0].name.startswith("Louny")


def test_cancelled_token_discards_result():
    async def scenario():
        async def handler(request):
            token.cancel()
            return httpx.Response(200, json={"items": [item_for(request)]})

        token = CancellationToken()
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            adapter = LocationAutocomplete(client, api_key="key", base_url=SUGGEST_URL)
            return await adapter.suggest("Louny", token)

    assert asyncio.run(scenario()) == []


def test_sessions_are_per_client():
    sessions = AutocompleteSessions(client=None, max_sessions=2)
    first = sessions.for_client("10.0.0.1")
    assert sessions.for_client("10.0.0.1") is first
    assert sessions.for_client("10.0.0.2") is not first

    sessions.for_client("10.0.0.3")
    # Least recently used client is dropped
    assert sessions.for_client("10.0.0.1") is not first


def test_apply_location_resolves_coordinates():
    record = make_event(location="", lat=0, lng=0)
    suggestion = LocationSuggestion(name="Pivovar Louny (restaurace)", position=Position(lat=50.35, lon=13.79))

    updated = apply_location(record, suggestion)
    assert updated.location == "Pivovar Louny"
    assert (updated.lat, updated.lng) == (50.35, 13.79)
    assert updated.has_resolved_location


def test_apply_location_without_position_stays_unresolved():
    updated = apply_location(make_event(lat=0, lng=0), LocationSuggestion(name="", label="Louny"))
    assert updated.location == "Louny"
    assert not updated.has_resolved_location


def test_typing_clears_coordinates():
    record = clear_location(make_event(), "Mírové nám")
    assert record.location == "Mírové nám"
    assert (record.lat, record.lng) == (0, 0)
