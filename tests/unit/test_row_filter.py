"""Unit tests for row matching and value ordering."""

from __future__ import annotations

import pytest

from helenabase_db.domain.services import compare_values, matches_where, strict_equals


@pytest.mark.unit
class TestMatchesWhere:
    """Tests for the equality filter."""

    def test_empty_filter_matches_all(self) -> None:
        assert matches_where({"a": 1}, {})
        assert matches_where({"a": 1}, None)

    def test_all_keys_must_match(self) -> None:
        row = {"name": "Alice", "age": 30}

        assert matches_where(row, {"name": "Alice", "age": 30})
        assert not matches_where(row, {"name": "Alice", "age": 31})

    def test_missing_key_never_matches(self) -> None:
        assert not matches_where({"name": "Alice"}, {"age": None})

    def test_null_matches_null(self) -> None:
        assert matches_where({"bio": None}, {"bio": None})

    def test_no_bool_number_coercion(self) -> None:
        assert not matches_where({"active": 1}, {"active": True})
        assert not matches_where({"count": False}, {"count": 0})
        assert matches_where({"count": 1}, {"count": 1.0})

    def test_strict_equals(self) -> None:
        assert strict_equals("1", "1")
        assert not strict_equals("1", 1)
        assert strict_equals([1, 2], [1, 2])


@pytest.mark.unit
class TestCompareValues:
    """Tests for three-way ordering."""

    def test_native_ordering(self) -> None:
        assert compare_values(1, 2) == -1
        assert compare_values("b", "a") == 1
        assert compare_values(2.5, 2.5) == 0

    def test_none_sorts_first(self) -> None:
        assert compare_values(None, 0) == -1
        assert compare_values("a", None) == 1
        assert compare_values(None, None) == 0

    def test_mixed_families_use_rank(self) -> None:
        assert compare_values(10, "1") == -1
        assert compare_values(True, 0) == -1

    def test_unordered_values(self) -> None:
        assert compare_values({"a": 1}, {"a": 1}) == 0
        assert compare_values({"a": 1}, {"a": 2}) == -1
