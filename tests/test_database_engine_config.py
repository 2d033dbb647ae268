
def test_get_engine_kwargs_sqlite_has_check_same_thread():
    from daydeck.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///./daydeck.db")
    assert "connect_args" in kwargs
    assert kwargs["connect_args"]["check_same_thread"] is False
    # File databases use the default pool.
    assert "poolclass" not in kwargs
    assert kwargs["pool_pre_ping"] is True


def test_get_engine_kwargs_memory_uses_static_pool():
    from sqlalchemy.pool import StaticPool
    from daydeck.database import database as db

    kwargs = db.get_engine_kwargs("sqlite:///:memory:")
    assert kwargs["poolclass"] is StaticPool


def test_get_engine_kwargs_echo_follows_debug(monkeypatch):
    from daydeck.database import database as db

    monkeypatch.setenv("DEBUG", "true")
    assert db.get_engine_kwargs("sqlite:///./daydeck.db")["echo"] is True
    monkeypatch.setenv("DEBUG", "false")
    assert db.get_engine_kwargs("sqlite:///./daydeck.db")["echo"] is False


def test_get_engine_kwargs_postgres_has_no_sqlite_args():
    from daydeck.database import database as db

    kwargs = db.get_engine_kwargs("postgresql+psycopg://u:p@localhost:5432/db")
    assert "connect_args" not in kwargs
    assert "poolclass" not in kwargs


def test_sqlite_url_detection():
    from daydeck.database import database as db

    assert db._is_sqlite_url("sqlite:///./daydeck.db") is True
    assert db._is_sqlite_url("postgresql+psycopg://u:p@localhost/db") is False
    assert db.is_memory_url("sqlite:///:memory:") is True
    assert db.is_memory_url("sqlite:///./daydeck.db") is False


def test_sqlite_pragmas_enable_foreign_keys(tmp_path):
    from daydeck.database import database as db

    database = db.Database(f"sqlite:///{tmp_path / 'daydeck.db'}")
    try:
        raw = database.engine.raw_connection()
        try:
            cursor = raw.cursor()
            cursor.execute("PRAGMA foreign_keys")
            assert cursor.fetchone()[0] == 1
            cursor.execute("PRAGMA journal_mode")
            assert cursor.fetchone()[0] == "wal"
        finally:
            raw.close()
    finally:
        database.dispose()


def test_pragmas_listener_ignores_other_drivers():
    from daydeck.database import database as db

    class FakeConnection:
        def cursor(self):
            raise AssertionError("should not be called")

    db.set_sqlite_pragmas(FakeConnection(), None)
