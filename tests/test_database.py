"""
Tests for database abstraction layer
"""

import pytest
import pandas as pd

from autotable.database.base_manager import DatabaseManager
from autotable.database.config import DatabaseConfig
from autotable.database.engine_factory import DatabaseFactory
from autotable.database.inspector import SchemaInspector
from autotable.database.queries.specific import SQLiteSpecificQueries
from autotable.database.utils.connection_utils import ConnectionUtils
from autotable.database.utils.type_mapping import ColumnType
from autotable.exceptions import DatabaseConnectionError, ExecutionError


class TestDatabaseFactory:
    """Test database factory functionality"""

    def test_create_manager(self):
        """Test creating a SQLite manager"""
        config = DatabaseConfig.get_default_config('sqlite')
        manager = DatabaseFactory.create_manager(**config)

        assert isinstance(manager, DatabaseManager)
        assert manager.db_type == 'sqlite'
        assert isinstance(manager.queries, SQLiteSpecificQueries)

    def test_get_supported_databases(self):
        """Test getting supported database list"""
        supported = DatabaseFactory.get_supported_databases()
        assert 'mysql' in supported
        assert 'sqlite' in supported
        assert 'postgresql' in supported

    def test_setup_verifies_connection(self, tmp_path):
        """Test setup from a connection string"""
        manager = DatabaseFactory.setup(f"sqlite:///{tmp_path / 'setup.db'}")
        assert manager.execute_query("SELECT 1 AS one") == [{'one': 1}]
        manager.close()

    def test_setup_unreachable_database(self, tmp_path):
        """Test connection failures surface at setup time"""
        missing_dir = tmp_path / 'missing' / 'nested' / 'x.db'
        with pytest.raises(DatabaseConnectionError):
            DatabaseFactory.setup(f"sqlite:///{missing_dir}")

    def test_create_from_config_requires_type(self):
        """Test configuration without db_type"""
        with pytest.raises(ValueError):
            DatabaseFactory.create_from_config({'connection_params': {}})


class TestConnectionUtils:
    """Test connection checks"""

    def test_connection_success(self, sqlite_manager):
        """Test a working connection reports its version"""
        result = ConnectionUtils.test_connection(sqlite_manager.engine)
        assert result['success'] is True
        assert result['database_type'] == 'sqlite'
        assert result['database_version']

    def test_connection_info(self):
        """Test connection info reports the dialect"""
        engine = DatabaseConfig.get_engine('sqlite', {'database': ':memory:'})
        info = ConnectionUtils.get_connection_info(engine)
        assert info['dialect'] == 'sqlite'


class TestDatabaseManager:
    """Test database manager functionality"""

    def test_ddl_dml_and_query(self, sqlite_manager):
        """Test insert, update, and delete operations"""
        sqlite_manager.execute_ddl("CREATE TABLE crud_test (id INTEGER PRIMARY KEY, value INT)")

        new_id = sqlite_manager.execute_insert(
            "INSERT INTO crud_test (value) VALUES (:value)", {'value': 100}
        )
        assert new_id == 1

        rows_updated = sqlite_manager.execute_dml(
            "UPDATE crud_test SET value = :value WHERE id = :id", {'value': 150, 'id': 1}
        )
        assert rows_updated == 1

        result = sqlite_manager.execute_query_one("SELECT value FROM crud_test WHERE id = 1")
        assert result == {'value': 150}

        rows_deleted = sqlite_manager.execute_dml("DELETE FROM crud_test WHERE id = :id", {'id': 1})
        assert rows_deleted == 1
        assert sqlite_manager.execute_query("SELECT * FROM crud_test") == []

    def test_query_one_no_match(self, sqlite_manager):
        """Test single-row query without a match"""
        assert sqlite_manager.execute_query_one("SELECT 1 AS x WHERE 1 = 0") is None

    def test_execution_error(self, sqlite_manager):
        """Test engine errors are raised as ExecutionError with the statement"""
        with pytest.raises(ExecutionError) as exc_info:
            sqlite_manager.execute_query("SELECT * FROM no_such_table")
        assert exc_info.value.statement == "SELECT * FROM no_such_table"

    def test_failed_script_rolls_back_dml(self, sqlite_manager):
        """Test a failing statement aborts the rest of the script"""
        sqlite_manager.execute_ddl("CREATE TABLE t (id INTEGER PRIMARY KEY, v INT)")
        with pytest.raises(ExecutionError):
            sqlite_manager.execute_script([
                "INSERT INTO t (v) VALUES (1)",
                "INSERT INTO missing (v) VALUES (2)",
            ])
        assert sqlite_manager.execute_query("SELECT * FROM t") == []

    def test_query_df(self, sqlite_manager):
        """Test querying as DataFrame"""
        sqlite_manager.execute_ddl("CREATE TABLE df_test (id INTEGER PRIMARY KEY, v INT)")
        for v in (1, 2, 3):
            sqlite_manager.execute_insert("INSERT INTO df_test (v) VALUES (:v)", {'v': v})

        df = sqlite_manager.execute_query_df("SELECT * FROM df_test WHERE v > :v ORDER BY id", {'v': 1})
        assert isinstance(df, pd.DataFrame)
        assert list(df['v']) == [2, 3]

    def test_context_manager(self, tmp_path):
        """Test the manager disposes its engine on exit"""
        config = DatabaseConfig.get_default_config('sqlite', str(tmp_path / 'ctx.db'))
        with DatabaseFactory.create_from_config(config) as manager:
            assert manager.execute_query("SELECT 1 AS x") == [{'x': 1}]


class TestSchemaInspector:
    """Test live schema introspection"""

    @pytest.fixture
    def inspector(self, sqlite_manager):
        sqlite_manager.execute_ddl(
            'CREATE TABLE "people" (id INTEGER PRIMARY KEY AUTOINCREMENT, '
            '"name" VARCHAR(255), "age" INT, "bio" text, "wide" BIGINT)'
        )
        return SchemaInspector(sqlite_manager)

    def test_table_exists(self, inspector):
        """Test existence check"""
        assert inspector.table_exists('people') is True
        assert inspector.table_exists('nobody') is False

    def test_table_exists_is_exact(self, inspector):
        """Test underscores are not treated as wildcards"""
        assert inspector.table_exists('peopl_') is False

    def test_list_columns_in_order(self, inspector):
        """Test columns come back in table order"""
        assert inspector.list_columns('people') == ['id', 'name', 'age', 'bio', 'wide']

    def test_list_columns_missing_table(self, inspector):
        """Test a missing table has no columns"""
        assert inspector.list_columns('nobody') == []

    def test_column_type(self, inspector):
        """Test declared types map back onto column types"""
        assert inspector.column_type('people', 'name') == ColumnType.VARCHAR
        assert inspector.column_type('people', 'age') == ColumnType.INT
        assert inspector.column_type('people', 'bio') == ColumnType.TEXT

    def test_column_type_unknown_and_absent(self, inspector):
        """Test unrecognised types are returned verbatim and absent columns as None"""
        assert inspector.column_type('people', 'wide') == 'BIGINT'
        assert inspector.column_type('people', 'missing') is None
