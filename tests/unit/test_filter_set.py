"""Unit tests for the FilterPredicateSet."""

import pytest

from schoolboard.application.services import ALL, FilterPredicateSet
from schoolboard.domain.entities import PublicationStatus, Test, TestCategory
from schoolboard.domain.exceptions import InvalidFilterError


@pytest.fixture
def changes() -> list[str]:
    return []


@pytest.fixture
def filters(changes: list[str]) -> FilterPredicateSet:
    return FilterPredicateSet(Test, on_change=lambda: changes.append("changed"))


def test_set_filter_accepts_enum_values(filters: FilterPredicateSet):
    filters.set_filter("status", PublicationStatus.PUBLISHED)
    filters.set_filter("test_category", "PYQ")
    assert filters.values == {"status": "published", "test_category": TestCategory.PYQ.value}


def test_open_domain_filter_accepts_any_value(filters: FilterPredicateSet):
    filters.set_filter("subject", "Mathematics")
    assert filters.values == {"subject": "Mathematics"}


@pytest.mark.parametrize("cleared", [ALL, "", None])
def test_all_sentinel_clears_the_key(filters: FilterPredicateSet, cleared):
    filters.set_filter("status", "draft")
    filters.set_filter("status", cleared)
    assert filters.values == {}


def test_unknown_key_is_rejected(filters: FilterPredicateSet):
    with pytest.raises(InvalidFilterError):
        filters.set_filter("title", "x")


def test_value_outside_domain_is_rejected(filters: FilterPredicateSet):
    with pytest.raises(InvalidFilterError):
        filters.set_filter("status", "deleted")
    assert filters.values == {}


def test_every_change_notifies(filters: FilterPredicateSet, changes: list[str]):
    filters.set_filter("status", "draft")
    filters.set_search("exam")
    filters.reset()
    assert len(changes) == 3


def test_active_filter_count_includes_search(filters: FilterPredicateSet):
    assert filters.active_filter_count == 0
    filters.set_filter("status", "draft")
    filters.set_filter("subject", "Physics")
    filters.set_search("   ")
    assert filters.active_filter_count == 2
    filters.set_search("exam")
    assert filters.active_filter_count == 3


def test_reset_clears_filters_and_search(filters: FilterPredicateSet):
    filters.set_filter("status", "draft")
    filters.set_search("exam")
    filters.reset()
    assert filters.values == {}
    assert filters.search_term == ""
