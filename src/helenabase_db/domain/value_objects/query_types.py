"""Enumerations shared by the query layer."""

from __future__ import annotations

from enum import Enum


class PolicyOperation(Enum):
    """Operation a row-level policy guards."""

    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class SortDirection(Enum):
    """ORDER BY direction."""

    ASC = "ASC"
    DESC = "DESC"

    @classmethod
    def parse(cls, text: str) -> SortDirection:
        try:
            return cls(text.strip().upper())
        except ValueError as e:
            raise ValueError(f"Invalid sort direction: {text!r}") from e


class ErrorKind(Enum):
    """Why an operation failed.

    NOT_FOUND and ALREADY_EXISTS are the structural failures of the
    catalog operations; the statement kinds come from execute_sql.
    """

    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID = "invalid"
    UNSUPPORTED_STATEMENT = "unsupported_statement"
    MALFORMED_STATEMENT = "malformed_statement"
    INTERNAL = "internal"
