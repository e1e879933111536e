"""Row matching and value ordering.

WHERE filters are equality-only: a row matches when every key of the
filter is present in the row with a strictly equal value. Strict means
booleans never equal numbers (True != 1) while 1 == 1.0 still holds.

Ordering compares values of mixed dynamic types. Values of the same
family use native ordering; None sorts before everything else and values
of incomparable families fall back to a fixed family rank.
"""

from __future__ import annotations

from typing import Any, Mapping

# Family rank for values that cannot be compared natively
_TYPE_RANK: dict[type, int] = {
    type(None): 0,
    bool: 1,
    int: 2,
    float: 2,
    str: 3,
    list: 4,
    dict: 5,
}


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without bool/number coercion."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    return left == right


def matches_where(row: Mapping[str, Any], where: Mapping[str, Any] | None) -> bool:
    """Check a row against an equality filter. An empty filter matches all."""
    if not where:
        return True
    for key, expected in where.items():
        if key not in row:
            return False
        if not strict_equals(row[key], expected):
            return False
    return True


def _rank(value: Any) -> int:
    return _TYPE_RANK.get(type(value), len(_TYPE_RANK))


def compare_values(left: Any, right: Any) -> int:
    """Three-way comparison of two cell values.

    Returns:
        -1 if left sorts first, 1 if right sorts first, 0 if tied.
    """
    if strict_equals(left, right):
        return 0
    left_rank, right_rank = _rank(left), _rank(right)
    if left_rank != right_rank:
        return -1 if left_rank < right_rank else 1
    try:
        if left < right:
            return -1
        if left > right:
            return 1
    except TypeError:
        # dicts and other unordered values
        left_text, right_text = repr(left), repr(right)
        if left_text < right_text:
            return -1
        if left_text > right_text:
            return 1
    return 0
