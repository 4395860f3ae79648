"""Shared fixtures: a file-backed SQLite database per test."""

import pytest

from autotable.database.config import DatabaseConfig
from autotable.database.engine_factory import DatabaseFactory
from autotable.repository import RecordRepository


@pytest.fixture
def sqlite_manager(tmp_path):
    """Create SQLite manager for testing"""
    config = DatabaseConfig.get_default_config('sqlite', str(tmp_path / 'records.db'))
    manager = DatabaseFactory.create_from_config(config)
    yield manager
    manager.close()


@pytest.fixture
def repository(sqlite_manager):
    """Repository bound to a table that does not exist yet"""
    return RecordRepository(sqlite_manager, 'people')
