"""MyDataShare API client — implements the JsonTransport interface.

Fetches public API resources with httpx. Paginated collections are
fetched page by page, following ``next_offset``, and combined into one
response.
"""

import logging
from typing import Any

import httpx

from mds_core.application.interfaces import JsonTransport
from mds_core.application.services.pagination import combine_paginated_responses
from mds_core.config import Settings, get_settings
from mds_core.domain.entities import AuthItem
from mds_core.domain.exceptions import ApiRequestError

logger = logging.getLogger(__name__)


class MdsApiClient(JsonTransport):
    """Infrastructure adapter — connects to the MyDataShare public API."""

    def __init__(
        self,
        settings: Settings | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._settings = settings or get_settings()
        self._http_client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._settings.http_timeout)

    async def fetch_json(
        self,
        url: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            return await self._send(client, url, method=method, params=params, json=json)
        finally:
            if should_close:
                await client.aclose()

    async def fetch_all_pages(
        self,
        url: str,
        *,
        method: str = "POST",
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Fetch every page of a paginated collection and combine them.

        The first page is requested with ``offset=0``; as long as a page
        carries ``next_offset``, the next one is requested from there.

        Raises:
            ApiRequestError: If any page request fails.
        """
        client = await self._get_client()
        should_close = self._http_client is None

        pages: list[dict[str, Any]] = []
        offset: Any = 0
        try:
            while True:
                page = await self._send(
                    client, url, method=method, params={"offset": offset}, json=json
                )
                pages.append(page)
                if "next_offset" not in page:
                    break
                offset = page["next_offset"]
        finally:
            if should_close:
                await client.aclose()

        logger.debug("Fetched %d page(s) from %s", len(pages), url)
        return combine_paginated_responses(pages)

    async def fetch_auth_items(self, *, fetch_all: bool = True) -> dict[str, Any]:
        """Fetch AuthItems with their IdProviders and metadata.

        With ``fetch_all`` unset only the first page is returned.
        """
        url = AuthItem.endpoint(self._settings)
        if fetch_all:
            return await self.fetch_all_pages(url, method="POST")
        return await self.fetch_json(url, method="POST")

    async def _send(
        self,
        client: httpx.AsyncClient,
        url: str,
        *,
        method: str,
        params: dict[str, Any] | None,
        json: dict[str, Any] | None,
    ) -> dict[str, Any]:
        try:
            response = await client.request(method, url, params=params, json=json)
        except httpx.RequestError as e:
            logger.error("MyDataShare API request to %s failed: %s", url, e)
            raise ApiRequestError(0, f"Failed to connect to MyDataShare API: {e}", url) from e

        if response.status_code != 200:
            logger.error(
                "MyDataShare API returned %d for %s %s",
                response.status_code,
                method,
                url,
            )
            raise ApiRequestError(
                response.status_code, response.reason_phrase or response.text, url
            )

        try:
            return response.json()
        except ValueError as e:
            raise ApiRequestError(
                response.status_code, "Response body is not valid JSON", url
            ) from e
