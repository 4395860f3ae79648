"""
Database configuration and engine management
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, URL, make_url
from sqlalchemy.exc import ArgumentError
from copy import deepcopy
from pathlib import Path
from typing import Dict, Any, Optional, Union
from jsonschema import Draft7Validator
import os
import yaml
import logging

from ..exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)

# SQLAlchemy driver for each supported database type
DRIVERS = {
    'mysql': 'mysql+pymysql',
    'postgresql': 'postgresql+psycopg2',
    'sqlite': 'sqlite',
}

# Environment variables that override values from the config file
ENV_DB_URL = 'AUTOTABLE_DB_URL'
ENV_DB_PASSWORD = 'AUTOTABLE_DB_PASSWORD'

CONFIG_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["database"],
    "properties": {
        "database": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": list(DRIVERS)},
                "url": {"type": "string"},
                "host": {"type": "string"},
                "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                "user": {"type": "string"},
                "password": {"type": ["string", "null"]},
                "database": {"type": "string"},
                "engine_args": {"type": "object"}
            },
            "anyOf": [
                {"required": ["type"]},
                {"required": ["url"]}
            ]
        },
        "logging": {
            "type": "object",
            "properties": {
                "level": {"type": "string",
                          "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]},
                "log_dir": {"type": "string"}
            }
        }
    }
}


class DatabaseConfig:
    """Configuration manager for database connections"""

    @staticmethod
    def build_url(db_type: str, connection_params: Dict[str, Any]) -> URL:
        """
        Build the SQLAlchemy URL for a database type

        Args:
            db_type: Database type ('mysql', 'postgresql', 'sqlite')
            connection_params: Database connection parameters

        Returns:
            SQLAlchemy URL
        """
        if db_type not in DRIVERS:
            raise ValueError(f"Unsupported database type: {db_type}")

        if db_type == 'sqlite':
            return URL.create(DRIVERS[db_type], database=connection_params.get('database', ':memory:'))

        default_port = 3306 if db_type == 'mysql' else 5432
        default_user = 'root' if db_type == 'mysql' else 'postgres'
        return URL.create(
            DRIVERS[db_type],
            username=connection_params.get('user', default_user),
            password=connection_params.get('password') or None,
            host=connection_params.get('host', 'localhost'),
            port=connection_params.get('port', default_port),
            database=connection_params.get('database', 'autotable'),
        )

    @staticmethod
    def default_engine_args(db_type: str) -> Dict[str, Any]:
        """Default engine arguments for a database type"""
        if db_type == 'sqlite':
            return {'pool_pre_ping': True, 'echo': False}
        return {
            'pool_size': 5,
            'max_overflow': 10,
            'pool_pre_ping': True,
            'echo': False,
        }

    @staticmethod
    def get_engine(db_type: str, connection_params: Dict[str, Any]) -> Engine:
        """
        Create SQLAlchemy engine based on database type and parameters

        Args:
            db_type: Database type ('mysql', 'postgresql', 'sqlite')
            connection_params: Database connection parameters

        Returns:
            SQLAlchemy Engine instance
        """
        if 'url' in connection_params:
            url = make_url(connection_params['url'])
        else:
            url = DatabaseConfig.build_url(db_type, connection_params)

        engine_args = DatabaseConfig.default_engine_args(db_type)
        engine_args.update(connection_params.get('engine_args', {}))

        logger.info(f"Creating {db_type} engine: {url.render_as_string(hide_password=True)}")
        try:
            return create_engine(url, **engine_args)
        except (ArgumentError, ImportError) as e:
            raise DatabaseConnectionError(f"Cannot create {db_type} engine: {e}") from e

    @staticmethod
    def from_url(url: str, username: Optional[str] = None,
                 password: Optional[str] = None) -> Dict[str, Any]:
        """
        Build a configuration from a connection string plus credentials

        Args:
            url: SQLAlchemy connection string (e.g. mysql+pymysql://host/db)
            username: Optional user name overriding the one in the URL
            password: Optional password overriding the one in the URL

        Returns:
            Configuration dictionary for DatabaseFactory.create_from_config
        """
        try:
            parsed = make_url(url)
        except ArgumentError as e:
            raise DatabaseConnectionError(f"Invalid connection string: {e}") from e

        if username is not None:
            parsed = parsed.set(username=username)
        if password is not None:
            parsed = parsed.set(password=password)

        db_type = parsed.get_backend_name()
        if db_type not in DRIVERS:
            raise DatabaseConnectionError(f"Unsupported database type: {db_type}")

        return {
            'db_type': db_type,
            'connection_params': {
                'url': parsed.render_as_string(hide_password=False),
                'engine_args': DatabaseConfig.default_engine_args(db_type),
            }
        }

    @staticmethod
    def get_default_config(db_type: str, database_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Get default configuration for a database type

        Args:
            db_type: Database type
            database_path: Optional database file path or name

        Returns:
            Default configuration dictionary
        """
        if db_type == 'sqlite':
            return {
                'db_type': 'sqlite',
                'connection_params': {
                    'database': database_path or ':memory:',
                    'engine_args': DatabaseConfig.default_engine_args('sqlite')
                }
            }
        elif db_type in ('mysql', 'postgresql'):
            return {
                'db_type': db_type,
                'connection_params': {
                    'user': 'root' if db_type == 'mysql' else 'postgres',
                    'password': '',
                    'host': 'localhost',
                    'port': 3306 if db_type == 'mysql' else 5432,
                    'database': database_path or 'autotable',
                    'engine_args': DatabaseConfig.default_engine_args(db_type)
                }
            }
        else:
            raise ValueError(f"Unsupported database type: {db_type}")

    @staticmethod
    def load_config(path: Union[str, Path]) -> Dict[str, Any]:
        """
        Load and validate a YAML configuration file

        The ``database`` section is turned into ``db_type`` and
        ``connection_params``; environment variables override the URL and
        password.

        Args:
            path: Path to YAML file

        Returns:
            Configuration dictionary with 'db_type', 'connection_params'
            and 'logging' keys
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config not found: {path}")

        with open(path, 'r', encoding='utf-8') as f:
            raw = yaml.safe_load(f) or {}

        errors = sorted(Draft7Validator(CONFIG_SCHEMA).iter_errors(raw), key=lambda e: list(e.path))
        if errors:
            details = '; '.join(f"{'.'.join(map(str, e.path)) or '<root>'}: {e.message}" for e in errors)
            raise ValueError(f"Invalid configuration in {path}: {details}")

        database = deepcopy(raw['database'])

        env_url = os.environ.get(ENV_DB_URL)
        if env_url:
            database['url'] = env_url
        env_password = os.environ.get(ENV_DB_PASSWORD)
        if env_password:
            database['password'] = env_password

        if 'url' in database:
            config = DatabaseConfig.from_url(database['url'], database.get('user'), database.get('password'))
            config['connection_params']['engine_args'].update(database.get('engine_args', {}))
        else:
            db_type = database.pop('type')
            config = {'db_type': db_type, 'connection_params': database}

        config['logging'] = raw.get('logging', {})
        logger.debug(f"Loaded {config['db_type']} configuration from {path}")
        return config
