"""Select pipeline in the Volcano iterator style.

A select is a chain of pull-based operators:

    SeqScanOperator -> FilterOperator -> SortOperator -> LimitOperator

Each operator exposes open(), next() and close(); next() returns None once
the operator is exhausted. Only the sort materializes its input, every
other stage streams one row at a time.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from functools import cmp_to_key
from typing import Any, Iterator, Mapping

from helenabase_db.domain.entities import Table
from helenabase_db.domain.services import compare_values, matches_where
from helenabase_db.domain.value_objects import RowData
from helenabase_db.ports.inbound import OrderBy, SelectOptions

_EMPTY: Iterator[RowData] = iter(())


class Operator(ABC):
    """Base class for pipeline operators."""

    @abstractmethod
    def open(self) -> None:
        """Prepare to produce rows."""

    @abstractmethod
    def next(self) -> RowData | None:
        """Produce the next row, or None when exhausted."""

    @abstractmethod
    def close(self) -> None:
        """Release anything held since open()."""

    def __iter__(self) -> Iterator[RowData]:
        self.open()
        try:
            while (row := self.next()) is not None:
                yield row
        finally:
            self.close()


class SeqScanOperator(Operator):
    """Rows of a table in storage order, each one deep-copied."""

    def __init__(self, table: Table) -> None:
        self._table = table
        self._cursor = _EMPTY

    def open(self) -> None:
        self._cursor = iter(list(self._table.rows))

    def next(self) -> RowData | None:
        row = next(self._cursor, None)
        return copy.deepcopy(row) if row is not None else None

    def close(self) -> None:
        self._cursor = _EMPTY


class FilterOperator(Operator):
    """Passes through rows matching an equality filter."""

    def __init__(self, child: Operator, where: Mapping[str, Any]) -> None:
        self._child = child
        self._where = where

    def open(self) -> None:
        self._child.open()

    def next(self) -> RowData | None:
        row = self._child.next()
        while row is not None and not matches_where(row, self._where):
            row = self._child.next()
        return row

    def close(self) -> None:
        self._child.close()


class SortOperator(Operator):
    """Multi-key sort.

    The first key on which two rows differ decides their order, in that
    key's direction. Rows equal on every key keep their input order.
    """

    def __init__(self, child: Operator, order_by: list[OrderBy]) -> None:
        self._child = child
        self._order_by = order_by
        self._cursor = _EMPTY

    def _compare(self, a: RowData, b: RowData) -> int:
        for key in self._order_by:
            order = compare_values(a.get(key.column), b.get(key.column))
            if order:
                return order if key.ascending else -order
        return 0

    def open(self) -> None:
        self._child.open()
        buffered: list[RowData] = []
        while (row := self._child.next()) is not None:
            buffered.append(row)
        self._cursor = iter(sorted(buffered, key=cmp_to_key(self._compare)))

    def next(self) -> RowData | None:
        return next(self._cursor, None)

    def close(self) -> None:
        self._child.close()
        self._cursor = _EMPTY


class LimitOperator(Operator):
    """Skips `offset` rows, then yields at most `limit` rows (None = all)."""

    def __init__(self, child: Operator, limit: int | None, offset: int = 0) -> None:
        self._child = child
        self._limit = limit
        self._offset = offset
        self._to_skip = offset
        self._remaining = limit

    def open(self) -> None:
        self._child.open()
        self._to_skip = self._offset
        self._remaining = self._limit

    def next(self) -> RowData | None:
        while self._to_skip > 0:
            self._to_skip -= 1
            if self._child.next() is None:
                self._to_skip = 0
                return None
        if self._remaining is not None:
            if self._remaining <= 0:
                return None
            self._remaining -= 1
        return self._child.next()

    def close(self) -> None:
        self._child.close()


def build_select_pipeline(table: Table, options: SelectOptions) -> Operator:
    """Chain the operators a select needs."""
    operator: Operator = SeqScanOperator(table)
    if options.where:
        operator = FilterOperator(operator, options.where)
    if options.order_by:
        operator = SortOperator(operator, options.order_by)
    if options.offset or options.limit is not None:
        operator = LimitOperator(operator, limit=options.limit, offset=options.offset)
    return operator


def execute_select(table: Table, options: SelectOptions) -> list[RowData]:
    """Run a select over a table and materialize the result rows."""
    return list(build_select_pipeline(table, options))
