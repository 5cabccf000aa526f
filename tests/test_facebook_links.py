"""
Tests for Facebook link normalization
"""

import asyncio

import httpx
import pytest

from app.services.facebook_links import normalize_facebook_url

RESOLVER = "https://resolver.test/api/resolve-link"


def normalize(url, handler=None, endpoint=RESOLVER):
    """Run the normalizer against a mocked resolver and record the requests it made"""
    requests = []

    def default_handler(request):
        return httpx.Response(200, json={"resolved": "https://www.facebook.com/events/123/"})

    def recording(request):
        requests.append(request)
        return (handler or default_handler)(request)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(recording)) as client:
            return await normalize_facebook_url(url, client, endpoint)

    return asyncio.run(scenario()), requests


def test_direct_event_link_is_canonicalized():
    result, requests = normalize("https://facebook.com/events/99887766")
    assert result == "https://www.facebook.com/events/99887766/"
    assert requests == []


@pytest.mark.parametrize("url", [
    "  https://m.facebook.com/events/99887766?ref=share  ",
    "http://www.facebook.com/events/99887766/",
    "facebook.com/events/99887766/permalink/",
])
def test_direct_link_variants(url):
    result, _ = normalize(url)
    assert result == "https://www.facebook.com/events/99887766/"


def test_normalization_is_idempotent_for_direct_links():
    once, _ = normalize("https://facebook.com/events/99887766")
    twice, _ = normalize(once)
    assert once == twice


def test_empty_input():
    assert normalize("")[0] == ""
    assert normalize("   ")[0] == ""
    assert normalize(None)[0] == ""


def test_other_urls_pass_through_trimmed():
    result, requests = normalize(" https://example.com/x ")
    assert result == "https://example.com/x"
    assert requests == []


def test_short_link_is_resolved():
    result, requests = normalize("https://fb.me/e/abc123")
    assert result == "https://www.facebook.com/events/123/"
    assert len(requests) == 1
    assert requests[0].url.params["url"] == "https://fb.me/e/abc123"


def test_short_link_resolver_error_status_keeps_original():
    result, _ = normalize("https://fb.me/e/abc123", lambda r: httpx.Response(500))
    assert result == "https://fb.me/e/abc123"


def test_short_link_network_failure_keeps_original():
    def failing(request):
        raise httpx.ConnectError("resolver down", request=request)

    result, _ = normalize("https://fb.me/e/abc123", failing)
    assert result == "https://fb.me/e/abc123"


def test_short_link_missing_resolved_field_keeps_original():
    result, _ = normalize("https://fb.me/e/abc123", lambda r: httpx.Response(200, json={"error": "nope"}))
    assert result == "https://fb.me/e/abc123"


def test_short_link_invalid_json_keeps_original():
    result, _ = normalize("https://fb.me/e/abc123", lambda r: httpx.Response(200, text="<html>"))
    assert result == "https://fb.me/e/abc123"


def test_short_link_without_resolver_configured():
    result, requests = normalize("https://fb.me/e/abc123", endpoint="")
    assert result == "https://fb.me/e/abc123"
    assert requests == []
