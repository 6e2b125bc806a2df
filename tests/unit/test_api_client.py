"""Unit tests for the MdsApiClient."""

import json

import httpx
import pytest

from mds_core.config import Settings
from mds_core.domain.exceptions import ApiRequestError
from mds_core.infrastructure.http import MdsApiClient


# ── Helpers ──


def _settings() -> Settings:
    return Settings(_env_file=None, api_base_url="https://api.example.com")


def _make_paginated_transport(pages: list[dict], seen: list[httpx.Request]) -> httpx.MockTransport:
    """Serve ``pages`` by their ``offset`` query parameter."""

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        offset = int(request.url.params["offset"])
        return httpx.Response(200, json=pages[offset])

    return httpx.MockTransport(handler)


# ── Tests ──


@pytest.mark.asyncio
async def test_fetch_all_pages_follows_next_offset():
    pages = [
        {"auth_items": {"a": {"uuid": "a"}}, "next_offset": 1},
        {"auth_items": {"b": {"uuid": "b"}}, "next_offset": 2},
        {"auth_items": {"c": {"uuid": "c"}}},
    ]
    seen: list[httpx.Request] = []
    client = MdsApiClient(
        _settings(),
        http_client=httpx.AsyncClient(transport=_make_paginated_transport(pages, seen)),
    )

    combined = await client.fetch_all_pages("https://api.example.com/public/v3.0/auth_items")

    assert set(combined["auth_items"]) == {"a", "b", "c"}
    assert [r.url.params["offset"] for r in seen] == ["0", "1", "2"]
    assert all(r.method == "POST" for r in seen)


@pytest.mark.asyncio
async def test_fetch_auth_items_uses_endpoint():
    seen: list[httpx.Request] = []
    pages = [{"auth_items": {}}]
    client = MdsApiClient(
        _settings(),
        http_client=httpx.AsyncClient(transport=_make_paginated_transport(pages, seen)),
    )

    await client.fetch_auth_items()

    assert seen[0].url.path == "/public/v3.0/auth_items"


@pytest.mark.asyncio
async def test_fetch_auth_items_first_page_only():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"auth_items": {"a": {}}, "next_offset": 1})

    client = MdsApiClient(
        _settings(), http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    result = await client.fetch_auth_items(fetch_all=False)

    assert result["next_offset"] == 1


@pytest.mark.asyncio
async def test_fetch_json_sends_body():
    received = {}

    def handler(request: httpx.Request) -> httpx.Response:
        received.update(json.loads(request.content))
        return httpx.Response(200, json={"ok": True})

    client = MdsApiClient(
        _settings(), http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    result = await client.fetch_json(
        "https://api.example.com/x", method="POST", json={"uuids": ["a"]}
    )

    assert result == {"ok": True}
    assert received == {"uuids": ["a"]}


@pytest.mark.asyncio
async def test_error_status_raises_api_request_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    client = MdsApiClient(
        _settings(), http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(ApiRequestError) as exc_info:
        await client.fetch_all_pages("https://api.example.com/public/v3.0/auth_items")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_connection_error_raises_api_request_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = MdsApiClient(
        _settings(), http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )

    with pytest.raises(ApiRequestError) as exc_info:
        await client.fetch_json("https://api.example.com/x")

    assert exc_info.value.status_code == 0
