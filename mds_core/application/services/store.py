"""Store — the in-memory aggregate of parsed API records."""

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mds_core.application.interfaces import DiscoveryClient
from mds_core.application.services.pagination import combine_paginated_responses
from mds_core.application.services.resource_parser import (
    AuthItemParser,
    TranslationParser,
    UrlParser,
    id_provider_parser,
    metadata_parser,
)
from mds_core.application.services.translations import (
    get_legacy_translation,
    get_translation,
    merge_translations,
)
from mds_core.application.services.urls import get_legacy_urls, get_urls
from mds_core.config import Settings
from mds_core.domain.entities import (
    AuthItem,
    Capability,
    IdProvider,
    Metadata,
    Record,
    Translation,
    Url,
)

logger = logging.getLogger(__name__)


class Store:
    """Parses API responses and keeps the resulting records.

    Parse responses with ``parse_api_response``; records parsed from a
    response are merged with the ones already stored, newer records
    replacing older ones under the same uuid.

    Records are looked up by uuid through ``get_auth_item``,
    ``get_id_provider`` and ``get_metadata``, which return None for
    records not loaded (yet). The store keeps no other indexes.

    Usage:
        store = Store(settings, discovery_client=HttpDiscoveryClient())
        store.parse_api_response(await api_client.fetch_auth_items())
        store.set_language("fin")
        auth_item = store.as_list(AuthItem)[0]
        name = store.translate(auth_item, "name")
    """

    def __init__(
        self,
        settings: Settings | None = None,
        discovery_client: DiscoveryClient | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.discovery_client = discovery_client
        # alpha-3 language code used when translating without an explicit language
        self.language: str | None = None

        self.auth_items: dict[str, AuthItem] = {}
        self.id_providers: dict[str, IdProvider] = {}
        self.metadatas: dict[str, Metadata] = {}
        self.translations: dict[str, dict[Any, dict[str, Translation]]] = {}
        self.urls: dict[Any, list[Url]] = {}

        self._auth_item_parser = AuthItemParser(self.settings, discovery_client)
        self._id_provider_parser = id_provider_parser()
        self._metadata_parser = metadata_parser()
        self._translation_parser = TranslationParser()
        self._url_parser = UrlParser()

    # ── Ingestion ───────────────────────────────────────────────────

    def parse_api_response(
        self, response: Mapping[str, Any] | Sequence[Mapping[str, Any]]
    ) -> None:
        """Parse records from an API response and merge them into the store.

        ``response`` is a decoded JSON response, or a list of paginated
        responses which are combined first. The caller's data is copied,
        never referenced.
        """
        res = copy.deepcopy(response)
        if isinstance(res, list):
            res = combine_paginated_responses(res)

        if self.settings.is_legacy:
            if "translations" in res:
                self.translations = merge_translations(
                    self.translations, self._translation_parser.parse(res, self)
                )
            if "urls" in res:
                self.urls = {**self.urls, **self._url_parser.parse(res, self)}
        elif "metadatas" in res:
            self.metadatas = {**self.metadatas, **self._metadata_parser.parse(res, self)}

        if "auth_items" in res:
            self.auth_items = {**self.auth_items, **self._auth_item_parser.parse(res, self)}

        if "id_providers" in res:
            self.id_providers = {
                **self.id_providers,
                **self._id_provider_parser.parse(res, self),
            }

        logger.debug(
            "Store now holds %d auth items, %d id providers, %d metadatas",
            len(self.auth_items),
            len(self.id_providers),
            len(self.metadatas),
        )

    def set_language(self, language: str | None) -> None:
        """Set the alpha-3 language code used by ``translate`` by default.

        Convert alpha-2 codes with ``mds_core.domain.languages.to_alpha_3``.
        """
        self.language = language

    def clear(self) -> None:
        """Remove all records. The language is kept."""
        self.auth_items = {}
        self.id_providers = {}
        self.metadatas = {}
        self.translations = {}
        self.urls = {}

    # ── Lookups ─────────────────────────────────────────────────────

    def get_auth_item(self, uuid: str | None) -> AuthItem | None:
        return self.auth_items.get(uuid)

    def get_id_provider(self, uuid: str | None) -> IdProvider | None:
        return self.id_providers.get(uuid)

    def get_metadata(self, uuid: str | None) -> Metadata | None:
        return self.metadatas.get(uuid)

    def by_uuid(self, record_cls: type[Record]) -> dict[Any, Record]:
        """Records of a kind keyed by uuid.

        The legacy translation and url pools are flattened for this.
        """
        if record_cls is Translation:
            return {
                translation.uuid: translation
                for groups in self.translations.values()
                for fields in groups.values()
                for translation in fields.values()
            }
        if record_cls is Url:
            return {url.uuid: url for group in self.urls.values() for url in group}

        collection = getattr(self, record_cls.plural_name(), None)
        if not collection:
            return {}
        return dict(collection)

    def as_list(self, record_cls: type[Record]) -> list[Record]:
        return list(self.by_uuid(record_cls).values())

    # ── Localized fields ────────────────────────────────────────────

    def translate(
        self,
        record: Record,
        field: str,
        *,
        language: str | None = None,
        not_found_error: bool = False,
        return_used_language: bool = False,
    ) -> Any:
        """Translate a record's field from this store's translations.

        Uses the store's language unless ``language`` is given. See
        ``get_translation`` for the fallback policy.

        Raises:
            TypeError: If the record kind is not translatable.
        """
        self._require(record, Capability.TRANSLATABLE)
        lang = language or self.language
        if self.settings.is_legacy:
            return get_legacy_translation(
                record, field, lang, self.translations, not_found_error=not_found_error
            )
        return get_translation(
            record,
            field,
            lang,
            self.metadatas,
            not_found_error=not_found_error,
            return_used_language=return_used_language,
        )

    def get_urls(
        self,
        record: Record,
        url_type: str,
        *,
        not_found_error: bool = True,
    ) -> list[Any]:
        """Return all URLs of a record with the given ``url_type``.

        Raises:
            TypeError: If the record kind does not have URLs.
            UrlNotFoundError: If none exist and ``not_found_error`` is set.
        """
        self._require(record, Capability.URL_CAPABLE)
        if self.settings.is_legacy:
            return get_legacy_urls(record, url_type, self.urls, not_found_error=not_found_error)
        return get_urls(record, url_type, self.metadatas, not_found_error=not_found_error)

    @staticmethod
    def _require(record: Record, capability: Capability) -> None:
        if not type(record).supports(capability):
            raise TypeError(
                f"{type(record).__name__} does not support {capability.value} lookups"
            )
