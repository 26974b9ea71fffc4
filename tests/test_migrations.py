"""
Tests that the initial migration matches the model metadata.
"""

import importlib.util
from pathlib import Path

import restaurant_admin.models  # noqa: F401
from restaurant_admin.db.base import Base

MIGRATION = Path(__file__).resolve().parents[1] / "alembic" / "versions" / "0001_initial_schema.py"


def load_migration():
    spec = importlib.util.spec_from_file_location("initial_schema", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_indexes_match_models():
    migration = load_migration()
    model_indexes = {
        index.name: index.unique for table in Base.metadata.tables.values() for index in table.indexes
    }
    migrated = {f"ix_{table}_id": False for table in migration.INDEXED_TABLES}
    migrated["ix_users_username"] = True
    assert migrated == model_indexes
