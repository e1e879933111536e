"""Minimal SQL statement recognizer.

Turns SQL text into a small statement AST using sqlglot's tokenizer and a
hand-written parser over the token stream. Exactly two statement shapes
are recognized:

    CREATE TABLE [schema.]name (col type [constraints], ...)
    SELECT <anything> FROM [schema.]name [anything]

Recognition is decided by the leading keywords. Text that starts with
neither is unsupported; text that starts with one of them but does not
have the expected shape is malformed.

Column constraints follow the console's substring rules over the
upper-cased column definition: nullable unless it contains "NOT NULL",
primary if it contains "PRIMARY KEY", unique if it contains "UNIQUE".

New statement kinds are added by registering a handler in
SQLParser._handlers.

References:
    - sqlglot tokenizer: https://sqlglot.com/sqlglot/tokens.html
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from sqlglot.errors import TokenError
from sqlglot.tokens import Token, Tokenizer, TokenType

from helenabase_db.domain.value_objects import DEFAULT_SCHEMA, ColumnType

_PUNCTUATION = {"(", ")", ",", ".", ";"}
_WORD = re.compile(r"\w+")


class StatementType(Enum):
    """Types of recognized SQL statements."""

    CREATE_TABLE = "create_table"
    SELECT = "select"


@dataclass
class ColumnSpec:
    """Column definition extracted from CREATE TABLE."""

    name: str
    type: ColumnType = ColumnType.TEXT
    nullable: bool = True
    primary: bool = False
    unique: bool = False
    length: int | None = None


@dataclass
class Statement(ABC):
    """Base class for recognized statements."""

    @property
    @abstractmethod
    def statement_type(self) -> StatementType:
        ...


@dataclass
class CreateTableStatement(Statement):
    """CREATE TABLE [schema.]name (...)."""

    schema: str
    table: str
    columns: list[ColumnSpec] = field(default_factory=list)

    @property
    def statement_type(self) -> StatementType:
        return StatementType.CREATE_TABLE

    def __str__(self) -> str:
        cols = ", ".join(f"{c.name} {c.type.value}" for c in self.columns)
        return f"CreateTable({self.schema}.{self.table}, [{cols}])"


@dataclass
class SelectStatement(Statement):
    """SELECT ... FROM [schema.]name."""

    schema: str
    table: str

    @property
    def statement_type(self) -> StatementType:
        return StatementType.SELECT

    def __str__(self) -> str:
        return f"Select({self.schema}.{self.table})"


class ParseError(Exception):
    """Error during SQL parsing."""

    pass


class UnsupportedStatementError(ParseError):
    """The statement is not one of the recognized kinds."""

    pass


class MalformedStatementError(ParseError):
    """A recognized statement kind whose shape could not be extracted."""

    pass


class SQLParser:
    """Recognizer for the supported statement subset.

    Example:
        >>> parser = SQLParser()
        >>> print(parser.parse("SELECT * FROM public.users"))
        Select(public.users)
    """

    def __init__(self, default_schema: str = DEFAULT_SCHEMA) -> None:
        """Initialize the parser.

        Args:
            default_schema: Schema used for unqualified table names.
        """
        self._default_schema = default_schema
        self._handlers: list[
            tuple[StatementType, Callable[[str], bool], Callable[[list[Token]], Statement]]
        ] = [
            (StatementType.CREATE_TABLE, self._is_create_table, self._parse_create_table),
            (StatementType.SELECT, self._is_select, self._parse_select),
        ]

    def classify(self, sql: str) -> StatementType | None:
        """Return the statement kind the text would be parsed as."""
        for statement_type, matches, _ in self._handlers:
            if matches(sql):
                return statement_type
        return None

    def parse(self, sql: str) -> Statement:
        """Parse a SQL string into a statement.

        Args:
            sql: The SQL statement to parse.

        Returns:
            The recognized statement.

        Raises:
            UnsupportedStatementError: If the statement kind is not recognized.
            MalformedStatementError: If a recognized statement is malformed.
        """
        for _, matches, build in self._handlers:
            if matches(sql):
                return build(self._tokenize(sql))
        raise UnsupportedStatementError("SQL parsing not fully implemented for this query")

    # Recognition

    @staticmethod
    def _is_create_table(sql: str) -> bool:
        return sql.strip().upper().split()[:2] == ["CREATE", "TABLE"]

    @staticmethod
    def _is_select(sql: str) -> bool:
        return sql.strip().upper().startswith("SELECT")

    # Token helpers

    def _tokenize(self, sql: str) -> list[Token]:
        try:
            tokens = Tokenizer().tokenize(sql.strip())
        except TokenError as e:
            raise MalformedStatementError(f"Failed to tokenize SQL: {e}") from e
        while tokens and tokens[-1].text == ";":
            tokens.pop()
        if any(t.text == ";" for t in tokens):
            raise MalformedStatementError("Multiple statements not supported")
        return tokens

    @staticmethod
    def _is_name(token: Token) -> bool:
        if token.token_type == TokenType.IDENTIFIER:
            return bool(token.text)
        return (
            token.token_type not in (TokenType.STRING, TokenType.NUMBER)
            and _WORD.fullmatch(token.text) is not None
        )

    def _parse_qualified_name(
        self, tokens: list[Token], pos: int, context: str
    ) -> tuple[str, str, int]:
        """Read `name` or `schema.name` starting at pos.

        Returns:
            (schema, table, position after the name)
        """
        if pos >= len(tokens) or not self._is_name(tokens[pos]):
            raise MalformedStatementError(f"{context} requires a table name")
        first = tokens[pos].text
        pos += 1
        if pos < len(tokens) and tokens[pos].text == ".":
            if pos + 1 >= len(tokens) or not self._is_name(tokens[pos + 1]):
                raise MalformedStatementError(f"{context} has an incomplete qualified name")
            return first, tokens[pos + 1].text, pos + 2
        return self._default_schema, first, pos

    # CREATE TABLE

    def _parse_create_table(self, tokens: list[Token]) -> Statement:
        pos = 2  # past CREATE TABLE
        # IF NOT EXISTS is accepted; creating an existing table is a no-op anyway
        if [t.text.upper() for t in tokens[pos : pos + 3]] == ["IF", "NOT", "EXISTS"]:
            pos += 3

        schema, table, pos = self._parse_qualified_name(tokens, pos, "CREATE TABLE")

        if pos >= len(tokens) or tokens[pos].text != "(":
            raise MalformedStatementError("CREATE TABLE requires a column list")

        groups = self._split_column_list(tokens, pos)
        columns = [self._parse_column(group) for group in groups]

        return CreateTableStatement(schema=schema, table=table, columns=columns)

    @staticmethod
    def _split_column_list(tokens: list[Token], open_pos: int) -> list[list[Token]]:
        """Split the parenthesised column list on top-level commas."""
        groups: list[list[Token]] = [[]]
        depth = 0
        for token in tokens[open_pos + 1 :]:
            if token.text == "(":
                depth += 1
            elif token.text == ")":
                if depth == 0:
                    break
                depth -= 1
            elif token.text == "," and depth == 0:
                groups.append([])
                continue
            groups[-1].append(token)
        else:
            raise MalformedStatementError("Unbalanced parentheses in column list")

        if any(not group for group in groups):
            raise MalformedStatementError("Empty column definition")
        return groups

    def _parse_column(self, group: list[Token]) -> ColumnSpec:
        if not self._is_name(group[0]):
            raise MalformedStatementError(f"Invalid column name: {group[0].text!r}")

        type_text = None
        length = None
        if len(group) > 1 and group[1].text not in _PUNCTUATION:
            type_text = group[1].text
            if (
                len(group) > 4
                and group[2].text == "("
                and group[3].token_type == TokenType.NUMBER
                and group[4].text == ")"
                and group[3].text.isdigit()
            ):
                length = int(group[3].text) or None

        definition = " ".join(t.text for t in group).upper()
        return ColumnSpec(
            name=group[0].text,
            type=ColumnType.parse(type_text),
            nullable="NOT NULL" not in definition,
            primary="PRIMARY KEY" in definition,
            unique="UNIQUE" in definition,
            length=length,
        )

    # SELECT

    def _parse_select(self, tokens: list[Token]) -> Statement:
        depth = 0
        for pos, token in enumerate(tokens):
            if token.text == "(":
                depth += 1
            elif token.text == ")":
                depth -= 1
            elif (
                depth == 0
                and token.token_type != TokenType.STRING
                and token.text.upper() == "FROM"
            ):
                schema, table, _ = self._parse_qualified_name(tokens, pos + 1, "SELECT")
                return SelectStatement(schema=schema, table=table)
        raise MalformedStatementError("SELECT requires a FROM clause")
