"""
Database package for the Palapa hotel administration backend.

This package provides modular database operations:
- connection: Database connection management (get_db, close_db, init_db)
- schema: Table creation, indexes and overlap triggers
- seed: Initial seed data

All functions are re-exported from this module.
"""

from database.connection import get_db, close_db, init_db
from database.schema import drop_tables, create_tables, create_indexes, create_triggers
from database.seed import seed_database

__all__ = [
    # Connection
    'get_db',
    'close_db',
    'init_db',
    # Schema
    'drop_tables',
    'create_tables',
    'create_indexes',
    'create_triggers',
    # Seed
    'seed_database',
]
