"""Tests for database initialization and connection management."""
from lexicard.db import get_connection, get_setting, init_db, set_setting


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    expected = {"cards", "exercise_scores", "user_settings", "review_sessions"}
    assert expected.issubset(tables)
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_init_db_creates_parent_directory(tmp_path):
    db_path = str(tmp_path / "nested" / "dir" / "cards.db")
    init_db(db_path)
    assert (tmp_path / "nested" / "dir" / "cards.db").exists()


def test_get_connection_enables_foreign_keys(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    assert conn.execute("PRAGMA foreign_keys").fetchone()[0] == 1
    conn.close()


def test_settings_round_trip(tmp_db):
    init_db(tmp_db)
    assert get_setting(tmp_db, "theme") is None
    assert get_setting(tmp_db, "theme", "light") == "light"
    set_setting(tmp_db, "theme", "dark")
    set_setting(tmp_db, "theme", "solarized")
    assert get_setting(tmp_db, "theme") == "solarized"
