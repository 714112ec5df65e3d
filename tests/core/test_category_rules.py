"""Tests for category naming and conflict rules."""

import pytest

from decision_log.core.category_rules import (
    all_known_categories, check_new_name_free, normalize_category_name,
)
from decision_log.core.errors import CategoryConflictError, InvalidInputError


def test_normalize_trims_and_lowercases():
    assert normalize_category_name("  Side Projects ") == "side projects"


def test_normalize_rejects_blank():
    with pytest.raises(InvalidInputError):
        normalize_category_name("   ")


def test_known_categories_union_sorted():
    known = all_known_categories(["travel"], ["work", "zen"], defaults=("work", "fun"))
    assert known == ["fun", "travel", "work", "zen"]


def test_rename_to_self_is_allowed():
    check_new_name_free("work", ["work", "fun"], old_name="work")


def test_rename_onto_other_name_conflicts():
    with pytest.raises(CategoryConflictError):
        check_new_name_free("fun", ["work", "fun"], old_name="work")
