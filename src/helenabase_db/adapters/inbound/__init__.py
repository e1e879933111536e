"""Inbound adapters for the relational store.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    SQL Parser:
        - SQLParser: Recognizer for CREATE TABLE and SELECT ... FROM
        - Statement, CreateTableStatement, SelectStatement: Parsed statements
        - ParseError, UnsupportedStatementError, MalformedStatementError

The REST API lives in helenabase_db.adapters.inbound.rest_api and is
imported from there, since it depends on the application layer.
"""

from helenabase_db.adapters.inbound.sql_parser import (
    ColumnSpec,
    CreateTableStatement,
    MalformedStatementError,
    ParseError,
    SelectStatement,
    SQLParser,
    Statement,
    StatementType,
    UnsupportedStatementError,
)

__all__ = [
    "SQLParser",
    "StatementType",
    "Statement",
    "CreateTableStatement",
    "SelectStatement",
    "ColumnSpec",
    "ParseError",
    "UnsupportedStatementError",
    "MalformedStatementError",
]
