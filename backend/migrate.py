#!/usr/bin/env python3
"""
Bring an existing database up to the current models.

Creates missing tables, adds nullable columns that older databases lack and
makes sure the one-application-per-candidate unique index exists.
Run from the repository root: `python backend/migrate.py`.
"""

import sys
from pathlib import Path

from sqlalchemy import inspect, text

# Add repository root to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from backend.app.database import Base, engine, init_db  # noqa: E402

APPLICATION_UNIQUE_NAME = "uq_applications_job_candidate"


def _missing_nullable_columns(inspector):
    """Yield (table, column) pairs present on the models but absent in the database."""
    for table in Base.metadata.sorted_tables:
        existing = {c["name"] for c in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in existing:
                continue
            if not column.nullable:
                print(f"✗ {table.name}.{column.name} is NOT NULL; add it manually")
                continue
            yield table, column


def migrate():
    print("Initializing database with all models...")
    init_db()
    print("✓ Database initialized successfully")

    inspector = inspect(engine)
    added = []
    for table, column in _missing_nullable_columns(inspector):
        col_type = column.type.compile(dialect=engine.dialect)
        ddl = f"ALTER TABLE {table.name} ADD COLUMN {column.name} {col_type}"
        try:
            with engine.begin() as conn:
                conn.execute(text(ddl))
            added.append(f"{table.name}.{column.name}")
        except Exception as e:
            print(f"✗ Failed to add column {table.name}.{column.name}: {e}")

    if added:
        print(f"✓ Added columns: {', '.join(added)}")
    else:
        print("✓ Columns already up to date")

    # If duplicates already exist, creation fails; the API still refuses new duplicates.
    try:
        existing_index_names = {i.get("name") for i in inspector.get_indexes("applications") if i.get("name")}
        existing_unique_names = {
            u.get("name") for u in inspector.get_unique_constraints("applications") if u.get("name")
        }
        if APPLICATION_UNIQUE_NAME not in existing_index_names | existing_unique_names:
            with engine.begin() as conn:
                conn.execute(text(
                    f"CREATE UNIQUE INDEX {APPLICATION_UNIQUE_NAME} ON applications (job_id, candidate_id)"
                ))
            print(f"✓ Added unique index: {APPLICATION_UNIQUE_NAME}")
        else:
            print(f"✓ Unique index already exists: {APPLICATION_UNIQUE_NAME}")
    except Exception as e:
        print(f"⚠ Could not add unique index {APPLICATION_UNIQUE_NAME}: {e}")
        return False

    return True


if __name__ == "__main__":
    success = migrate()
    sys.exit(0 if success else 1)
