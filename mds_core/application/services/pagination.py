"""Combining paginated MyDataShare API responses into one response.

The API is paginated. A response contains ``next_offset`` when more data
is left; passing that value as ``offset`` on the next request continues
the listing. Collecting the pages is the transport's job (see
``MdsApiClient.fetch_all_pages``); this module only merges them.
"""

import copy
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from mds_core.application.services.translations import merge_translations
from mds_core.domain.exceptions import EmptyInputError

logger = logging.getLogger(__name__)

TRANSLATIONS_KEY = "translations"


def combine_paginated_responses(pages: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge unmodified full JSON responses into a single response.

    Page 0 is the starting point. For every later page, each top-level
    JSON object is merged into the combined response: later pages win per
    sub-key, except ``translations`` which is merged per language and
    translation id so sibling languages survive. A key that was null so
    far takes the later object. Top-level scalars and lists keep the
    first page's value.

    Raises:
        EmptyInputError: If ``pages`` is empty.
    """
    if not pages:
        raise EmptyInputError()

    combined = copy.deepcopy(dict(pages[0]))
    if len(pages) == 1:
        return combined

    for page in pages[1:]:
        for resource_name, resources in copy.deepcopy(dict(page)).items():
            if not isinstance(resources, Mapping):
                continue
            if combined.get(resource_name) is None:
                combined[resource_name] = {}
            elif not isinstance(combined[resource_name], dict):
                continue
            if resource_name == TRANSLATIONS_KEY:
                combined[resource_name] = merge_translations(
                    combined[resource_name], resources
                )
            else:
                combined[resource_name].update(resources)

    logger.debug("Combined %d paginated responses", len(pages))
    return combined
