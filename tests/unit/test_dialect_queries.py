"""Unit tests for dialect-specific statement text."""

import pytest
from collections import OrderedDict

from autotable.database.queries.specific import (
    MySQLSpecificQueries, PostgreSQLSpecificQueries, SQLiteSpecificQueries
)
from autotable.database.utils.type_mapping import ColumnType
from autotable.exceptions import QueryInjectionError


class TestMySQLQueries:
    """Test MySQL statement text."""

    @pytest.fixture
    def queries(self):
        return MySQLSpecificQueries()

    def test_create_table(self, queries):
        """Test CREATE TABLE puts the auto-increment key first."""
        columns = OrderedDict([('name', ColumnType.VARCHAR), ('age', ColumnType.INT)])
        assert queries.create_table_statement('users', columns) == (
            "CREATE TABLE `users` (id INT AUTO_INCREMENT PRIMARY KEY, "
            "`name` VARCHAR(255), `age` INT)"
        )

    def test_add_and_modify(self, queries):
        """Test ADD and MODIFY statements."""
        assert queries.add_column_statement('users', 'bio', ColumnType.TEXT) == \
            "ALTER TABLE `users` ADD `bio` TEXT"
        assert queries.change_column_type_statements('users', 'bio', ColumnType.TEXT, []) == [
            "ALTER TABLE `users` MODIFY `bio` TEXT"
        ]

    @pytest.mark.parametrize("reported,expected", [
        ('varchar(255)', ColumnType.VARCHAR),
        ('int', ColumnType.INT),
        ('int(11)', ColumnType.INT),
        ('tinyint(1)', ColumnType.BOOLEAN_AS_TINYINT),
        ('float', ColumnType.FLOAT),
        ('text', ColumnType.TEXT),
        ('datetime', ColumnType.DATETIME),
    ])
    def test_reported_types_normalized(self, queries, reported, expected):
        """Test the types MySQL reports map back onto column types."""
        assert queries.normalize_declared_type(reported) == expected

    def test_unknown_type_kept_verbatim(self, queries):
        """Test unknown types are upper-cased and never equal an inferred type."""
        normalized = queries.normalize_declared_type('bigint(20) unsigned')
        assert normalized == 'BIGINT(20) UNSIGNED'
        assert all(normalized != column_type for column_type in ColumnType)

    def test_table_lookup_is_parameterized(self, queries):
        """Test the table name travels as a parameter in introspection."""
        sql, params = queries.table_exists_query('users')
        assert 'users' not in sql
        assert params == {'table_name': 'users'}


class TestPostgreSQLQueries:
    """Test PostgreSQL statement text."""

    @pytest.fixture
    def queries(self):
        return PostgreSQLSpecificQueries()

    def test_create_table(self, queries):
        """Test CREATE TABLE uses SERIAL and PostgreSQL type names."""
        columns = OrderedDict([
            ('flag', ColumnType.BOOLEAN_AS_TINYINT),
            ('score', ColumnType.FLOAT),
            ('at', ColumnType.DATETIME),
        ])
        assert queries.create_table_statement('events', columns) == (
            'CREATE TABLE "events" (id SERIAL PRIMARY KEY, '
            '"flag" SMALLINT, "score" DOUBLE PRECISION, "at" TIMESTAMP)'
        )

    def test_change_type_uses_cast(self, queries):
        """Test the type change casts existing values."""
        assert queries.change_column_type_statements('events', 'score', ColumnType.TEXT, []) == [
            'ALTER TABLE "events" ALTER COLUMN "score" TYPE TEXT USING "score"::TEXT'
        ]

    @pytest.mark.parametrize("reported,expected", [
        ('character varying(255)', ColumnType.VARCHAR),
        ('integer', ColumnType.INT),
        ('smallint', ColumnType.BOOLEAN_AS_TINYINT),
        ('double precision', ColumnType.FLOAT),
        ('text', ColumnType.TEXT),
        ('timestamp without time zone', ColumnType.DATETIME),
    ])
    def test_reported_types_normalized(self, queries, reported, expected):
        """Test format_type() spellings map back onto column types."""
        assert queries.normalize_declared_type(reported) == expected

    def test_insert_returns_id(self, queries):
        """Test inserts ask for the generated key."""
        assert queries.insert_suffix == ' RETURNING id'


class TestSQLiteQueries:
    """Test SQLite statement text."""

    @pytest.fixture
    def queries(self):
        return SQLiteSpecificQueries()

    def test_create_table(self, queries):
        """Test CREATE TABLE uses AUTOINCREMENT."""
        assert queries.create_table_statement('t', {'a': ColumnType.TEXT}) == \
            'CREATE TABLE "t" (id INTEGER PRIMARY KEY AUTOINCREMENT, "a" TEXT)'

    def test_add_column(self, queries):
        """Test ADD COLUMN statement."""
        assert queries.add_column_statement('t', 'b', ColumnType.INT) == \
            'ALTER TABLE "t" ADD COLUMN "b" INT'

    def test_change_type_rebuilds_table(self, queries):
        """Test a type change copies rows into a rebuilt table."""
        live = [('id', 'INTEGER'), ('note', 'VARCHAR(255)'), ('n', 'INT')]
        statements = queries.change_column_type_statements('t', 'note', ColumnType.TEXT, live)

        assert statements[1] == (
            'CREATE TABLE "t__autotable_rebuild" '
            '(id INTEGER PRIMARY KEY AUTOINCREMENT, "note" TEXT, "n" INT)'
        )
        assert statements[2] == (
            'INSERT INTO "t__autotable_rebuild" ("id", "note", "n") '
            'SELECT "id", "note", "n" FROM "t"'
        )
        assert statements[3].startswith("UPDATE sqlite_sequence SET seq")
        assert "'t__autotable_rebuild'" in statements[4]
        assert statements[5] == 'DROP TABLE "t"'
        assert statements[6] == 'ALTER TABLE "t__autotable_rebuild" RENAME TO "t"'

    def test_declared_type_case_insensitive(self, queries):
        """Test declared types compare case-insensitively."""
        assert queries.normalize_declared_type('varchar(255)') == ColumnType.VARCHAR
        assert queries.normalize_declared_type(None) is None

    def test_quote_rejects_bad_identifier(self, queries):
        """Test quoting validates first."""
        with pytest.raises(QueryInjectionError):
            queries.quote('a"; DROP TABLE t; --')
