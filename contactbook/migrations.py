# contactbook/migrations.py
from typing import Iterable
from sqlalchemy.engine import Engine

def _pragma_table_info(conn, table: str) -> set[str]:
    rows = conn.exec_driver_sql(f"PRAGMA table_info({table})").all()
    # row tuple: (cid, name, type, notnull, dflt_value, pk)
    return {r[1] for r in rows}

def _has_table(conn, table: str) -> bool:
    r = conn.exec_driver_sql(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
        (table,),
    ).fetchone()
    return bool(r)

def _ensure_columns(conn, table: str, needed: Iterable[tuple[str, str]]):
    if not _has_table(conn, table):
        return
    existing = _pragma_table_info(conn, table)
    for name, ddl in needed:
        if name not in existing:
            conn.exec_driver_sql(f"ALTER TABLE {table} ADD COLUMN {name} {ddl}")

def run_migrations(engine: Engine) -> None:
    """Idempotent, SQLite-only migrations. Safe to run at every startup."""
    if engine.url.get_backend_name() != "sqlite":
        return

    with engine.begin() as conn:  # transactional
        conn.exec_driver_sql("PRAGMA foreign_keys = ON")

        # ---- users table ----
        _ensure_columns(conn, "users", [
            ("is_active", "BOOLEAN DEFAULT 1"),
            ("created_at", "DATETIME"),
        ])

        # ---- contacts table ----
        if not _has_table(conn, "contacts"):
            return
        _ensure_columns(conn, "contacts", [
            ("version", "INTEGER NOT NULL DEFAULT 1"),
            ("created_at", "DATETIME"),
            ("updated_at", "DATETIME"),
        ])
        # every list/get filters on the owner
        conn.exec_driver_sql(
            "CREATE INDEX IF NOT EXISTS ix_contacts_owner_user_id ON contacts(owner_user_id)"
        )
