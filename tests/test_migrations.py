"""Startup migrations on legacy SQLite databases."""

from sqlalchemy import inspect, text

from contactbook.database import init_db, make_engine


def _columns(engine, table):
    return {c["name"] for c in inspect(engine).get_columns(table)}


def test_init_db_upgrades_legacy_contacts_table(tmp_path) -> None:
    engine = make_engine(f"sqlite:///{tmp_path / 'legacy.db'}")
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE contacts ("
            "id INTEGER PRIMARY KEY, name VARCHAR(80), phone VARCHAR(9) NOT NULL, "
            "email VARCHAR(50) NOT NULL, owner_user_id VARCHAR(36) NOT NULL)"
        ))
        conn.execute(text(
            "INSERT INTO contacts (name, phone, email, owner_user_id) "
            "VALUES ('John', '012345678', 'j@x.com', 'u1')"
        ))

    init_db(engine)

    assert {"version", "created_at", "updated_at"} <= _columns(engine, "contacts")
    assert "users" in inspect(engine).get_table_names()
    index_names = {ix["name"] for ix in inspect(engine).get_indexes("contacts")}
    assert "ix_contacts_owner_user_id" in index_names
    with engine.connect() as conn:
        row = conn.execute(text("SELECT phone, version FROM contacts")).one()
    assert row == ("012345678", 1)
    engine.dispose()


def test_init_db_is_idempotent(tmp_path) -> None:
    engine = make_engine(f"sqlite:///{tmp_path / 'fresh.db'}")

    init_db(engine)
    init_db(engine)

    assert "version" in _columns(engine, "contacts")
    engine.dispose()
