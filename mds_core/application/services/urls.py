"""URL lookup for API objects, including OpenID discovery URLs.

Unified schema: URLs are metadata records with ``type == "url"``,
``subtype1 == <url_type>`` and the URL object in ``json_data``; they link
to their owner both through the owner's ``metadatas.uuid`` list and their
own ``model_uuid``. Legacy schema: ``urls`` maps ``url_group_id`` to a list
of URL objects discriminated by ``url_type``.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from mds_core.application.services.translations import LINKING_FIELD, linked_metadata
from mds_core.domain.exceptions import (
    LinkingFieldMissingError,
    NotFoundReason,
    UrlNotFoundError,
)

URL_TYPE = "url"
OPENID_CONFIGURATION = "openid_configuration"


def get_url_metadata(
    obj: Mapping[str, Any],
    url_type: str,
    metadatas: Mapping[str, Mapping[str, Any]] | None,
    *,
    not_found_error: bool = False,
) -> list[Mapping[str, Any]]:
    """Return the object's URL metadata records of ``url_type``.

    Returns an empty list when nothing is found, or raises
    ``UrlNotFoundError`` if ``not_found_error`` is set.

    Raises:
        LinkingFieldMissingError: Always, if ``obj`` has no ``metadatas.uuid``.
    """
    if LINKING_FIELD not in obj:
        raise LinkingFieldMissingError()

    if metadatas is None:
        if not_found_error:
            raise UrlNotFoundError(NotFoundReason.POOL_MISSING, "Did not receive metadatas")
        return []

    found = [
        entry
        for entry in linked_metadata(obj, metadatas, URL_TYPE)
        if entry.get("subtype1") == url_type
    ]
    if not found and not_found_error:
        raise UrlNotFoundError(
            NotFoundReason.URL_TYPE_MISSING,
            f'No urls with url_type "{url_type}" exist for object {obj.get("uuid")}',
        )
    return found


def get_urls(
    obj: Mapping[str, Any],
    url_type: str,
    metadatas: Mapping[str, Mapping[str, Any]] | None,
    *,
    not_found_error: bool = False,
) -> list[dict[str, Any]]:
    """Return the URL objects (``json_data``) of ``url_type`` linked to ``obj``."""
    return [
        dict(entry.get("json_data") or {})
        for entry in get_url_metadata(
            obj, url_type, metadatas, not_found_error=not_found_error
        )
    ]


def get_legacy_urls(
    obj: Mapping[str, Any],
    url_type: str,
    urls: Mapping[Any, Sequence[Mapping[str, Any]]] | None,
    *,
    not_found_error: bool = False,
) -> list[Mapping[str, Any]]:
    """Return URLs of ``url_type`` in the object's url group (legacy schema).

    An empty list is returned when none are found, unless
    ``not_found_error`` is set.
    """

    def not_found(reason: NotFoundReason, message: str) -> list:
        if not_found_error:
            raise UrlNotFoundError(reason, message)
        return []

    if not urls:
        return not_found(NotFoundReason.POOL_MISSING, "Did not receive urls")

    group_id = obj.get("url_group_id")
    group = urls.get(group_id)
    if group is None and group_id is not None:
        group = urls.get(str(group_id))
    if group is None:
        return not_found(
            NotFoundReason.RECORD_MISSING,
            f"No urls exist for url_group_id {group_id}",
        )

    found = [url for url in group if url.get("url_type") == url_type]
    if not found:
        return not_found(
            NotFoundReason.URL_TYPE_MISSING,
            f'No urls with url_type "{url_type}" exist in group {group_id}',
        )
    return found


def get_oid_config_url(
    id_provider: Mapping[str, Any],
    metadatas: Mapping[str, Mapping[str, Any]] | None,
) -> str | None:
    """Discovery document URL of an IdProvider from a metadata pool, or None."""
    for entry in (metadatas or {}).values():
        if (
            entry.get("model_uuid") == id_provider.get("uuid")
            and entry.get("type") == URL_TYPE
            and entry.get("subtype1") == OPENID_CONFIGURATION
        ):
            return (entry.get("json_data") or {}).get("url")
    return None


def get_legacy_oid_config_url(
    id_provider: Mapping[str, Any],
    urls: Mapping[Any, Sequence[Mapping[str, Any]]] | None,
) -> str | None:
    """Discovery document URL of an IdProvider from a legacy urls pool, or None."""
    found = get_legacy_urls(id_provider, OPENID_CONFIGURATION, urls)
    if not found:
        return None
    return found[0].get("url")
