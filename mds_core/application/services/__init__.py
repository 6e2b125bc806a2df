from .pagination import combine_paginated_responses
from .translations import (
    TranslatedValue,
    get_legacy_translation,
    get_translation,
    get_translation_metadata,
    merge_translations,
    translate_all,
)
from .urls import (
    get_legacy_oid_config_url,
    get_legacy_urls,
    get_oid_config_url,
    get_url_metadata,
    get_urls,
)
from .resource_parser import AuthItemParser, ResourceParser, TranslationParser, UrlParser
from .store import Store
from .authorization import AuthorizationService, parse_query_string

__all__ = [
    "combine_paginated_responses",
    "TranslatedValue",
    "get_legacy_translation",
    "get_translation",
    "get_translation_metadata",
    "merge_translations",
    "translate_all",
    "get_legacy_oid_config_url",
    "get_legacy_urls",
    "get_oid_config_url",
    "get_url_metadata",
    "get_urls",
    "AuthItemParser",
    "ResourceParser",
    "TranslationParser",
    "UrlParser",
    "Store",
    "AuthorizationService",
    "parse_query_string",
]
