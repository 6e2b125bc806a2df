"""Parsers turning flat JSON collections of an API response into records.

Every parser takes a combined API response and the owning store, and
returns a new mapping; merging it into the store is the store's job. A
response without data of the parser's kind yields an empty mapping.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from mds_core.application.interfaces import DiscoveryClient
from mds_core.application.services.urls import get_legacy_oid_config_url, get_oid_config_url
from mds_core.config import Settings
from mds_core.domain.entities import (
    AuthItem,
    IdProvider,
    Metadata,
    OidConfigState,
    Record,
    Translation,
    Url,
)

if TYPE_CHECKING:
    from mds_core.application.services.store import Store

logger = logging.getLogger(__name__)


class ResourceParser:
    """Parses the ``<resource_name>s`` collection, keyed by uuid."""

    def __init__(self, record_cls: type[Record]):
        self.record_cls = record_cls

    @property
    def key(self) -> str:
        return self.record_cls.plural_name()

    def parse(self, api_response: Mapping[str, Any], store: "Store | None") -> dict[str, Any]:
        resources = api_response.get(self.key)
        if not resources:
            return {}

        parsed: dict[str, Record] = {}
        for obj in resources.values():
            uuid = obj.get("uuid")
            if uuid is None:
                logger.warning("Skipping %s without uuid", self.record_cls.resource_name)
                continue
            parsed[uuid] = self.record_cls(store, obj)

        logger.debug("Parsed %d %s", len(parsed), self.key)
        return parsed


class AuthItemParser(ResourceParser):
    """Parses AuthItems, joining them with their IdProvider's discovery URL.

    AuthItems of an IdProvider without a discovery URL are left out: they
    cannot be used to authorize. When background fetching is enabled, one
    discovery fetch is started per IdProvider and shared by its AuthItems.
    """

    def __init__(self, settings: Settings, discovery_client: DiscoveryClient | None = None):
        super().__init__(AuthItem)
        self._settings = settings
        self._discovery_client = discovery_client

    @property
    def url_pool_key(self) -> str:
        return "urls" if self._settings.is_legacy else "metadatas"

    def parse(self, api_response: Mapping[str, Any], store: "Store | None") -> dict[str, Any]:
        id_providers = api_response.get("id_providers")
        url_pool = api_response.get(self.url_pool_key)
        auth_items = api_response.get(self.key)
        if not id_providers or not url_pool or not auth_items:
            return {}

        parsed: dict[str, AuthItem] = {}
        for idp_uuid, idp in id_providers.items():
            items = [
                item for item in auth_items.values()
                if item.get("id_provider_uuid") == idp_uuid
            ]
            if not items:
                continue

            oid_config_url = self._find_oid_config_url(idp, url_pool)
            if not oid_config_url:
                logger.debug(
                    "Skipping %d auth item(s) of id provider %s: no OpenID configuration URL",
                    len(items),
                    idp_uuid,
                )
                continue

            state = self._start_oid_config_fetch(oid_config_url)
            for item in items:
                parsed[item["uuid"]] = AuthItem(
                    store,
                    item,
                    extra=item.get("auth_params") or None,
                    oid_config_url=oid_config_url,
                    oid_config_state=state,
                    discovery_client=self._discovery_client,
                )

        logger.debug("Parsed %d auth_items", len(parsed))
        return parsed

    def _find_oid_config_url(self, idp: Mapping[str, Any], url_pool: Mapping[Any, Any]) -> str | None:
        if self._settings.is_legacy:
            return get_legacy_oid_config_url(idp, url_pool)
        return get_oid_config_url(idp, url_pool)

    def _start_oid_config_fetch(self, url: str) -> OidConfigState:
        """Start one shared discovery fetch, if enabled and possible."""
        if not self._settings.auth_item.background_fetch_oid_config:
            return OidConfigState.not_started()
        if self._discovery_client is None:
            return OidConfigState.not_started()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Parsed outside an event loop; the fetch happens on first use
            logger.debug("No running event loop, OID configuration fetch deferred: %s", url)
            return OidConfigState.not_started()

        task = loop.create_task(self._discovery_client.fetch_oid_config(url))
        return OidConfigState.pending(task)


class TranslationParser(ResourceParser):
    """Reshapes the legacy ``translations`` pool into Translation records."""

    def __init__(self) -> None:
        super().__init__(Translation)

    def parse(self, api_response: Mapping[str, Any], store: "Store | None") -> dict[str, Any]:
        translations = api_response.get(self.key)
        if not translations:
            return {}
        return {
            language: {
                translation_id: {
                    field_name: Translation(store, translation)
                    for field_name, translation in fields.items()
                }
                for translation_id, fields in groups.items()
            }
            for language, groups in translations.items()
        }


class UrlParser(ResourceParser):
    """Reshapes the legacy ``urls`` pool (url_group_id -> list) into Url records."""

    def __init__(self) -> None:
        super().__init__(Url)

    def parse(self, api_response: Mapping[str, Any], store: "Store | None") -> dict[str, Any]:
        urls = api_response.get(self.key)
        if not urls:
            return {}
        return {
            group_id: [Url(store, url) for url in group]
            for group_id, group in urls.items()
        }


def id_provider_parser() -> ResourceParser:
    return ResourceParser(IdProvider)


def metadata_parser() -> ResourceParser:
    return ResourceParser(Metadata)
