"""OpenID Connect discovery client — implements the DiscoveryClient interface.

Fetches an identity provider's discovery document and performs the
authorization-code token request, using httpx.
"""

import logging
from typing import Any

import httpx

from mds_core.application.interfaces import DiscoveryClient
from mds_core.domain.entities import OidConfiguration
from mds_core.domain.exceptions import AuthorizationError

logger = logging.getLogger(__name__)

WELL_KNOWN_PATH = "/.well-known/openid-configuration"


def discovery_document_url(url: str) -> str:
    """Full discovery document URL from an issuer or discovery document URL."""
    issuer = url[: -len(WELL_KNOWN_PATH)] if url.endswith(WELL_KNOWN_PATH) else url
    return issuer.rstrip("/") + WELL_KNOWN_PATH


class HttpDiscoveryClient(DiscoveryClient):
    """Infrastructure adapter — talks to identity provider endpoints."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self._http_client = http_client
        self._timeout = timeout

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def fetch_oid_config(self, url: str) -> OidConfiguration | None:
        document_url = discovery_document_url(url)
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.get(document_url)
            except httpx.HTTPError as e:
                logger.warning("Fetching OID configuration from %s failed: %s", document_url, e)
                return None

            if response.status_code != 200:
                logger.warning(
                    "Fetching OID configuration from %s returned %d",
                    document_url,
                    response.status_code,
                )
                return None

            try:
                oid_config = OidConfiguration.from_json(response.json())
            except (ValueError, KeyError, TypeError) as e:
                logger.warning("Invalid OID configuration at %s: %s", document_url, e)
                return None
        finally:
            if should_close:
                await client.aclose()

        logger.debug("Fetched OID configuration from %s", document_url)
        return oid_config

    async def request_token(
        self,
        oid_config: OidConfiguration,
        *,
        client_id: str,
        redirect_uri: str,
        code: str,
        code_verifier: str | None = None,
    ) -> dict[str, Any]:
        data = {
            "grant_type": "authorization_code",
            "client_id": client_id,
            "redirect_uri": redirect_uri,
            "code": code,
        }
        if code_verifier:
            data["code_verifier"] = code_verifier

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(
                    oid_config.token_endpoint,
                    data=data,
                    headers={"Accept": "application/json"},
                )
            except httpx.RequestError as e:
                logger.error("Token request to %s failed: %s", oid_config.token_endpoint, e)
                raise AuthorizationError(f"Token request error: {e}") from e

            if response.status_code != 200:
                logger.error(
                    "Token endpoint %s returned %d",
                    oid_config.token_endpoint,
                    response.status_code,
                )
                raise AuthorizationError(
                    f"Token request error: {response.status_code} {response.text}"
                )

            try:
                return response.json()
            except ValueError as e:
                raise AuthorizationError("Token response is not valid JSON") from e
        finally:
            if should_close:
                await client.aclose()
