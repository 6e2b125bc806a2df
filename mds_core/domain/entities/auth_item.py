"""AuthItem — a way to authenticate, bound to one IdProvider."""

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mds_core.domain.exceptions import OidConfigError

from .oid_config import OidConfigState, OidConfigStatus, OidConfiguration
from .record import Capability, Record
from .resources import IdProvider

if TYPE_CHECKING:
    from mds_core.application.interfaces import DiscoveryClient
    from mds_core.application.services.store import Store
    from mds_core.config import Settings

logger = logging.getLogger(__name__)


class AuthItem(Record):
    """An ``auth_item`` API object.

    Besides its source fields an AuthItem carries:
        extra:            the ``auth_params`` to add to authorization requests
        oid_config_url:   discovery document URL of its IdProvider
        oid_config_state: where fetching that document stands

    AuthItems of the same IdProvider may share one pending discovery fetch.
    Awaiting it through ``resolve_oid_config`` is always safe: a shared
    fetch that failed resolves to ``None`` and a fresh attempt is made.
    """

    resource_name = "auth_item"
    capabilities = frozenset({Capability.TRANSLATABLE, Capability.URL_CAPABLE})

    def __init__(
        self,
        store: "Store | None",
        properties: Mapping[str, Any],
        *,
        extra: str | Mapping[str, Any] | None = None,
        oid_config_url: str | None = None,
        oid_config_state: OidConfigState | None = None,
        discovery_client: "DiscoveryClient | None" = None,
    ):
        super().__init__(store, properties)
        self.extra = extra
        self.oid_config_url = oid_config_url
        self.oid_config_state = oid_config_state or OidConfigState.not_started()
        self._discovery_client = discovery_client

    @classmethod
    def endpoint(cls, settings: "Settings") -> str:
        """Full URL of the auth_items endpoint."""
        return settings.endpoint(cls.plural_name())

    @property
    def oid_config(self) -> OidConfiguration | None:
        if self.oid_config_state.status == OidConfigStatus.READY:
            return self.oid_config_state.config
        return None

    def set_oid_config(self, oid_config: OidConfiguration) -> None:
        """Set the OpenID configuration manually."""
        self.oid_config_state = OidConfigState.ready(oid_config)

    def get_id_provider(self) -> IdProvider | None:
        """Return this AuthItem's IdProvider from the store, or None."""
        if self.store is None:
            return None
        return self.store.get_id_provider(self.get("id_provider_uuid"))

    async def fetch_oid_config(self) -> OidConfiguration:
        """Fetch the OpenID configuration from the issuer, ignoring any cached state.

        Raises:
            OidConfigError: If ``oid_config_url`` is not set or the fetch failed.
        """
        if not self.oid_config_url:
            raise OidConfigError(
                "Cannot fetch OID configuration because oid_config_url is not set."
            )
        oid_config = await self._fetch_fresh()
        if oid_config is None:
            raise OidConfigError("Could not fetch OID configuration.")
        return oid_config

    async def resolve_oid_config(self) -> OidConfiguration | None:
        """Return the OpenID configuration, fetching it only when needed.

        A pending shared fetch is awaited rather than repeated. If it
        resolved to nothing, or no fetch was started, one fresh attempt is
        made. Returns None when the configuration stays unavailable.
        """
        state = self.oid_config_state
        if state.status == OidConfigStatus.READY:
            return state.config

        if state.status == OidConfigStatus.PENDING and state.task is not None:
            oid_config = await state.task
            if oid_config is not None:
                self.oid_config_state = OidConfigState.ready(oid_config)
                return oid_config
            logger.info(
                "Shared OID configuration fetch failed for auth item %s, retrying",
                self.uuid,
            )
            self.oid_config_state = OidConfigState.failed()

        if not self.oid_config_url:
            return None
        return await self._fetch_fresh()

    async def _fetch_fresh(self) -> OidConfiguration | None:
        client = self._get_discovery_client()
        oid_config = await client.fetch_oid_config(self.oid_config_url)
        if oid_config is None:
            self.oid_config_state = OidConfigState.failed()
        else:
            self.oid_config_state = OidConfigState.ready(oid_config)
        return oid_config

    def _get_discovery_client(self) -> "DiscoveryClient":
        """Return the injected client or the store's."""
        if self._discovery_client is not None:
            return self._discovery_client
        if self.store is not None and self.store.discovery_client is not None:
            return self.store.discovery_client
        raise OidConfigError("No discovery client available to fetch OID configuration.")
