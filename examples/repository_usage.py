"""
Example usage of the record repository
"""

import logging
from datetime import datetime

from autotable import DatabaseFactory, RecordRepository, ThreadSchemaLock
from autotable.database.config import DatabaseConfig
from autotable.database.logging_config import setup_db_logging

logger = logging.getLogger(__name__)


def example_basic_usage():
    """Basic repository operations example"""
    print("=== Basic Repository Usage ===")

    # Configuration - easy to switch between databases
    config = DatabaseConfig.get_default_config('sqlite')  # or 'mysql', 'postgresql'
    db = DatabaseFactory.create_from_config(config, verify=True)

    users = RecordRepository(db, 'users')

    # The table is created from the first record
    ada_id = users.create({'name': 'Ada', 'age': 36, 'active': True})
    bob_id = users.create({'name': 'Bob', 'age': 40, 'joined': datetime(2024, 1, 15, 9, 0)})
    print(f"Created users {ada_id} and {bob_id}")
    print(f"Columns: {users.inspector.list_columns('users')}")

    # A longer value widens the column before it is written
    users.update(ada_id, {'bio': 'Mathematician. ' * 30})
    print(f"bio column type: {users.inspector.column_type('users', 'bio')}")

    print("\n--- Queries ---")
    print(f"Total users: {users.count()}")
    print(f"Aged 40: {users.find_by_column('age', 40, exclude=['bio'])}")
    print(users.find_all_df())

    updated = users.update_where_empty({'active': False}, {'active': None})
    print(f"Filled missing 'active' on {updated} rows")

    rows = users.query("SELECT name FROM users WHERE age > :age", {'age': 30})
    print(f"Raw query: {rows}")

    users.delete(bob_id)
    print(f"Remaining users: {users.count()}")

    db.close()


def example_shared_lock():
    """Several repositories on one table sharing a schema lock"""
    print("\n=== Shared Schema Lock ===")

    with DatabaseFactory.setup('sqlite:///:memory:') as db:
        lock = ThreadSchemaLock()
        writer_a = RecordRepository(db, 'events', schema_lock=lock)
        writer_b = RecordRepository(db, 'events', schema_lock=lock)

        writer_a.create({'kind': 'start'})
        writer_b.create({'kind': 'stop', 'duration': 1.5})
        print(writer_a.find_all())


if __name__ == "__main__":
    setup_db_logging({'logging': {'level': 'INFO'}})
    example_basic_usage()
    example_shared_lock()
