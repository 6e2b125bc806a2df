"""Abstract discovery client — port for OpenID Connect provider endpoints."""

from abc import ABC, abstractmethod
from typing import Any

from mds_core.domain.entities import OidConfiguration


class DiscoveryClient(ABC):
    """Port — fetches discovery documents and exchanges authorization codes."""

    @abstractmethod
    async def fetch_oid_config(self, url: str) -> OidConfiguration | None:
        """Fetch the discovery document at ``url``.

        ``url`` may be the issuer URL or the full
        ``/.well-known/openid-configuration`` URL.

        Returns None instead of raising when the document cannot be
        fetched, so a fetch shared by several AuthItems never fails them.
        """
        ...

    @abstractmethod
    async def request_token(
        self,
        oid_config: OidConfiguration,
        *,
        client_id: str,
        redirect_uri: str,
        code: str,
        code_verifier: str | None = None,
    ) -> dict[str, Any]:
        """Exchange an authorization code at the token endpoint.

        Raises:
            AuthorizationError: If the token endpoint rejects the request.
        """
        ...
