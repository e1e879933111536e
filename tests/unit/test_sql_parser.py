"""Unit tests for the SQL statement recognizer."""

from __future__ import annotations

import pytest

from helenabase_db.adapters.inbound import (
    CreateTableStatement,
    MalformedStatementError,
    SelectStatement,
    SQLParser,
    StatementType,
    UnsupportedStatementError,
)
from helenabase_db.domain.value_objects import ColumnType


@pytest.fixture
def parser() -> SQLParser:
    """Create a SQL parser for testing."""
    return SQLParser()


@pytest.mark.unit
class TestClassify:
    """Tests for statement classification."""

    def test_create_table(self, parser: SQLParser) -> None:
        assert parser.classify("  create   table t (a int)") == StatementType.CREATE_TABLE

    def test_select(self, parser: SQLParser) -> None:
        assert parser.classify("select 1") == StatementType.SELECT

    def test_unsupported(self, parser: SQLParser) -> None:
        assert parser.classify("INSERT INTO t VALUES (1)") is None
        assert parser.classify("") is None


@pytest.mark.unit
class TestCreateTable:
    """Tests for CREATE TABLE parsing."""

    def test_qualified_name_and_columns(self, parser: SQLParser) -> None:
        stmt = parser.parse(
            "CREATE TABLE app.posts (id UUID PRIMARY KEY, title VARCHAR(200) NOT NULL, "
            "slug TEXT UNIQUE, body TEXT)"
        )

        assert isinstance(stmt, CreateTableStatement)
        assert stmt.schema == "app"
        assert stmt.table == "posts"
        assert [c.name for c in stmt.columns] == ["id", "title", "slug", "body"]

        id_col, title, slug, body = stmt.columns
        assert id_col.type == ColumnType.UUID
        assert id_col.primary
        assert title.type == ColumnType.VARCHAR
        assert title.length == 200
        assert not title.nullable
        assert slug.unique
        assert body.nullable
        assert not body.primary

    def test_unqualified_uses_default_schema(self, parser: SQLParser) -> None:
        stmt = parser.parse("CREATE TABLE notes (text_body TEXT)")

        assert stmt.schema == "public"
        assert stmt.table == "notes"

    def test_custom_default_schema(self) -> None:
        stmt = SQLParser(default_schema="app").parse("CREATE TABLE notes (a TEXT)")

        assert stmt.schema == "app"

    def test_lowercase_constraints(self, parser: SQLParser) -> None:
        stmt = parser.parse("create table t (a integer not null, b integer)")

        assert not stmt.columns[0].nullable
        assert stmt.columns[1].nullable

    def test_unknown_type_is_text(self, parser: SQLParser) -> None:
        stmt = parser.parse("CREATE TABLE t (shape GEOMETRY)")

        assert stmt.columns[0].type == ColumnType.TEXT

    def test_missing_type_is_text(self, parser: SQLParser) -> None:
        stmt = parser.parse("CREATE TABLE t (a, b INT)")

        assert stmt.columns[0].type == ColumnType.TEXT
        assert stmt.columns[1].type == ColumnType.INTEGER

    def test_if_not_exists_accepted(self, parser: SQLParser) -> None:
        stmt = parser.parse("CREATE TABLE IF NOT EXISTS t (a INT)")

        assert (stmt.schema, stmt.table) == ("public", "t")
        assert [c.name for c in stmt.columns] == ["a"]

    def test_trailing_semicolon(self, parser: SQLParser) -> None:
        stmt = parser.parse("CREATE TABLE t (a INT);")

        assert stmt.table == "t"

    def test_nested_parentheses_do_not_split(self, parser: SQLParser) -> None:
        stmt = parser.parse("CREATE TABLE t (price NUMERIC(10, 2), qty INT)")

        assert [c.name for c in stmt.columns] == ["price", "qty"]
        assert stmt.columns[0].type == ColumnType.FLOAT

    def test_missing_column_list(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("CREATE TABLE t")

    def test_unbalanced_parentheses(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("CREATE TABLE t (a INT")

    def test_empty_column_definition(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("CREATE TABLE t (a INT,)")

    def test_non_identifier_column_rejected(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("CREATE TABLE t (`a` INT)")

    def test_multiple_statements(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("CREATE TABLE t (a INT); SELECT * FROM t")


@pytest.mark.unit
class TestSelect:
    """Tests for SELECT parsing."""

    def test_qualified(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT * FROM public.users")

        assert isinstance(stmt, SelectStatement)
        assert (stmt.schema, stmt.table) == ("public", "users")
        assert str(stmt) == "Select(public.users)"

    def test_unqualified_with_trailing_clauses(self, parser: SQLParser) -> None:
        stmt = parser.parse("select id, name from users where id = 1 order by name")

        assert (stmt.schema, stmt.table) == ("public", "users")

    def test_from_inside_string_ignored(self, parser: SQLParser) -> None:
        stmt = parser.parse("SELECT 'from nowhere' AS label FROM logs")

        assert stmt.table == "logs"

    def test_missing_from(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("SELECT 1")

    def test_unterminated_string(self, parser: SQLParser) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse("SELECT 'oops FROM users")

    def test_quoted_identifier_table(self, parser: SQLParser) -> None:
        stmt = parser.parse('SELECT * FROM "audit_log"')

        assert stmt.table == "audit_log"

    @pytest.mark.parametrize(
        "sql",
        [
            "SELECT * FROM `t`",
            "SELECT * FROM 'users'",
            "SELECT * FROM public.`t`",
            "SELECT * FROM 42",
        ],
    )
    def test_non_identifier_table_rejected(self, parser: SQLParser, sql: str) -> None:
        with pytest.raises(MalformedStatementError):
            parser.parse(sql)


@pytest.mark.unit
class TestUnsupported:
    """Tests for unsupported statements."""

    @pytest.mark.parametrize(
        "sql",
        [
            "INSERT INTO users (name) VALUES ('a')",
            "DROP TABLE users",
            "UPDATE users SET name = 'b'",
            "WITH x AS (SELECT 1) SELECT * FROM x",
        ],
    )
    def test_unsupported_message(self, parser: SQLParser, sql: str) -> None:
        with pytest.raises(
            UnsupportedStatementError, match="SQL parsing not fully implemented for this query"
        ):
            parser.parse(sql)
