"""Translation lookup for API objects, with fallback to untranslated values.

Two pool shapes exist, one per API schema generation:

    metadatas (unified):  {metadata_uuid: {"type": "translation",
                                           "subtype1": <language>,
                                           "json_data": {field: value}}}
    translations (legacy): {language: {translation_id: {field: {"translation": ...}}}}

An object is linked to its unified translations through its
``metadatas.uuid`` list, and to legacy ones through ``translation_id``.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from mds_core.domain.exceptions import (
    LinkingFieldMissingError,
    NotFoundReason,
    TranslationNotFoundError,
)

LINKING_FIELD = "metadatas.uuid"
TRANSLATION_TYPE = "translation"


@dataclass(frozen=True)
class TranslatedValue:
    """A resolved value and the language it should be attributed to."""

    val: Any
    lang: str | None


def linked_metadata(
    obj: Mapping[str, Any],
    metadatas: Mapping[str, Mapping[str, Any]],
    metadata_type: str,
) -> list[Mapping[str, Any]]:
    """Metadata records of ``metadata_type`` listed in ``obj["metadatas.uuid"]``."""
    linked = set(obj.get(LINKING_FIELD) or ())
    return [
        entry
        for key, entry in metadatas.items()
        if key in linked and entry.get("type") == metadata_type
    ]


def get_translation_metadata(
    obj: Mapping[str, Any],
    language: str,
    metadatas: Mapping[str, Mapping[str, Any]] | None,
) -> Mapping[str, Any] | None:
    """Return the object's translation metadata record for ``language``, or None."""
    if not metadatas or LINKING_FIELD not in obj:
        return None
    for entry in linked_metadata(obj, metadatas, TRANSLATION_TYPE):
        if entry.get("subtype1") == language:
            return entry
    return None


def get_translation(
    obj: Mapping[str, Any],
    field: str,
    language: str,
    metadatas: Mapping[str, Mapping[str, Any]] | None,
    *,
    not_found_error: bool = False,
    return_used_language: bool = False,
) -> Any:
    """Return the translation of ``obj[field]`` from a unified metadata pool.

    Checks run in order: pool received, object linked to metadata,
    translation exists for the language, field exists in it. At the first
    failing check, ``TranslationNotFoundError`` is raised if
    ``not_found_error`` is set (``LinkingFieldMissingError`` for an
    unlinked object); otherwise the object's own ``field`` value is
    returned.

    With ``return_used_language`` a ``TranslatedValue`` is returned
    instead. A found translation is attributed to ``language``; a fallback
    to the object's ``default_language``, or None when it has none.
    """

    def not_found(reason: NotFoundReason, message: str) -> Any:
        if not_found_error:
            if reason == NotFoundReason.NOT_LINKED:
                raise LinkingFieldMissingError(message)
            raise TranslationNotFoundError(reason, message)
        default = obj.get(field)
        if return_used_language:
            return TranslatedValue(val=default, lang=obj.get("default_language"))
        return default

    if metadatas is None:
        return not_found(NotFoundReason.POOL_MISSING, "Did not receive metadatas")

    if LINKING_FIELD not in obj:
        return not_found(NotFoundReason.NOT_LINKED, "Given object does not have metadata.")

    entry = get_translation_metadata(obj, language, metadatas)
    if entry is None:
        return not_found(
            NotFoundReason.LANGUAGE_MISSING,
            f"No translations exist for language {language}.",
        )

    json_data = entry.get("json_data") or {}
    if field not in json_data:
        return not_found(
            NotFoundReason.FIELD_MISSING,
            f"No translations for field {field} exist for language {language}.",
        )

    value = json_data[field]
    if return_used_language:
        return TranslatedValue(val=value, lang=language)
    return value


def _translation_group(groups: Mapping[Any, Any], translation_id: Any) -> Any:
    """Translation ids are JSON object keys, so they may arrive as strings."""
    if translation_id in groups:
        return groups[translation_id]
    return groups.get(str(translation_id))


def get_legacy_translation(
    obj: Mapping[str, Any],
    field: str,
    language: str,
    translations: Mapping[str, Mapping[Any, Mapping[str, Any]]] | None,
    *,
    not_found_error: bool = False,
) -> Any:
    """Return the translation of ``obj[field]`` from a legacy translations pool.

    Same fallback policy as ``get_translation``; the object is linked
    through its ``translation_id``.
    """

    def not_found(reason: NotFoundReason, message: str) -> Any:
        if not_found_error:
            raise TranslationNotFoundError(reason, message)
        return obj.get(field)

    if translations is None:
        return not_found(NotFoundReason.POOL_MISSING, "Did not receive translations")

    if "translation_id" not in obj:
        return not_found(
            NotFoundReason.NOT_LINKED,
            "Given object does not have translation_id property.",
        )

    if language not in translations:
        return not_found(
            NotFoundReason.LANGUAGE_MISSING,
            f"No translations exist for language {language}",
        )

    translation_id = obj["translation_id"]
    fields = _translation_group(translations[language], translation_id)
    if fields is None:
        return not_found(
            NotFoundReason.RECORD_MISSING,
            f"No translations with translation_id {translation_id} "
            f"exist for language {language}.",
        )

    if field not in fields:
        return not_found(
            NotFoundReason.FIELD_MISSING,
            f"No translations for field {field} with translation_id {translation_id} "
            f"exist for language {language}.",
        )
    return fields[field]["translation"]


def translate_all(
    language: str,
    fields: Iterable[str],
    objects: Iterable[Mapping[str, Any]],
    pool: Mapping[Any, Any] | None,
    *,
    not_found_error: bool = False,
    legacy: bool = False,
) -> list[dict[str, Any]]:
    """Return translated shallow copies of ``objects``.

    Every field in ``fields`` is replaced with its translation, or kept
    when none exists. The given objects are not modified. Errors come only
    from the resolver, i.e. when ``not_found_error`` is set.
    """
    resolve: Callable[..., Any] = get_legacy_translation if legacy else get_translation
    fields = list(fields)
    translated = []
    for item in objects:
        new_item = dict(item)
        for field in fields:
            new_item[field] = resolve(
                item, field, language, pool, not_found_error=not_found_error
            )
        translated.append(new_item)
    return translated


def _copy_pool(translations: Mapping[Any, Mapping[Any, Mapping[str, Any]]]) -> dict:
    """Copy the language and translation-id levels; leaf records are shared."""
    return {
        language: {tid: dict(fields) for tid, fields in groups.items()}
        for language, groups in translations.items()
    }


def merge_translations(
    old: Mapping[Any, Any] | None,
    new: Mapping[Any, Any] | None,
) -> dict[Any, Any]:
    """Merge two legacy translation pools into a new one.

    Languages only in ``old`` or only in ``new`` are kept whole. For a
    shared language and translation id, the field maps are merged with
    ``new`` winning per field. Neither input is modified.
    """
    merged = _copy_pool(old or {})
    if not new:
        return merged

    for language, groups in new.items():
        if language not in merged:
            merged[language] = {tid: dict(fields) for tid, fields in groups.items()}
            continue
        for tid, fields in groups.items():
            merged[language].setdefault(tid, {}).update(fields)
    return merged
