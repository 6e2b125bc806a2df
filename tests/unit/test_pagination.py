"""Unit tests for combining paginated API responses."""

import copy

import pytest

from mds_core.application.services.pagination import combine_paginated_responses
from mds_core.domain.exceptions import EmptyInputError


def test_combine_empty_input_raises():
    with pytest.raises(EmptyInputError, match="No JSON argument given."):
        combine_paginated_responses([])


def test_combine_single_page_returns_copy():
    page = {"auth_items": {"a": {"uuid": "a"}}, "next_offset": 1}
    combined = combine_paginated_responses([page])
    assert combined == page
    combined["auth_items"]["b"] = {}
    assert "b" not in page["auth_items"]


def test_combine_merges_objects_later_pages_win():
    pages = [
        {"auth_items": {"a": {"uuid": "a", "name": "old"}}, "next_offset": 1},
        {"auth_items": {"a": {"uuid": "a", "name": "new"}, "b": {"uuid": "b"}}},
    ]
    combined = combine_paginated_responses(pages)
    assert combined["auth_items"] == {
        "a": {"uuid": "a", "name": "new"},
        "b": {"uuid": "b"},
    }


def test_combine_keeps_first_page_scalars():
    pages = [{"next_offset": 1, "count": 3}, {"count": 5, "ids": [1, 2]}]
    assert combine_paginated_responses(pages) == {"next_offset": 1, "count": 3}


def test_combine_adds_collections_missing_from_first_page():
    pages = [{"auth_items": {}}, {"id_providers": {"i": {"uuid": "i"}}}]
    combined = combine_paginated_responses(pages)
    assert combined["id_providers"] == {"i": {"uuid": "i"}}


def test_combine_replaces_null_collection_with_later_object():
    pages = [{"urls": None}, {"urls": {"1": [{"uuid": "u1"}]}}]
    assert combine_paginated_responses(pages) == {"urls": {"1": [{"uuid": "u1"}]}}


def test_combine_merges_translations_per_language():
    pages = [
        {"translations": {"fin": {"1": {"name": {"translation": "Nimi"}}}}},
        {"translations": {
            "fin": {"2": {"name": {"translation": "Toinen"}}},
            "eng": {"1": {"name": {"translation": "Name"}}},
        }},
    ]
    combined = combine_paginated_responses(pages)
    assert set(combined["translations"]) == {"fin", "eng"}
    assert set(combined["translations"]["fin"]) == {"1", "2"}


def test_combine_does_not_modify_pages():
    pages = [
        {"metadatas": {"m1": {"uuid": "m1"}}},
        {"metadatas": {"m2": {"uuid": "m2"}}},
    ]
    original = copy.deepcopy(pages)
    combine_paginated_responses(pages)
    assert pages == original
