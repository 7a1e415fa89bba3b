import asyncio
import sqlite3

import pytest

from wordma.errors import StoreUnavailable
from wordma.models import Article
from wordma.store import MIGRATIONS, SCHEMA_VERSION, ExecuteResult, Store


def test_store_opens_lazily_and_reuses_connection(tmp_path):
    db = tmp_path / "data" / "wordma.db"
    store = Store(db)
    assert not store.is_open
    assert not db.exists()

    async def scenario():
        await store.query("SELECT 1")
        first = store._conn
        await store.query("SELECT 1")
        return first, store._conn

    try:
        first, second = asyncio.run(scenario())
    finally:
        store.close()
    assert db.exists()
    assert first is second
    assert not store.is_open


def test_store_applies_schema(tmp_path):
    store = Store(tmp_path / "wordma.db")
    try:
        asyncio.run(store.connect())
        version = asyncio.run(store.query("PRAGMA user_version"))[0][0]
        tables = asyncio.run(
            store.query("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
        )
        columns = asyncio.run(store.query("PRAGMA table_info(site)"))
    finally:
        store.close()
    assert version == SCHEMA_VERSION
    names = {row["name"] for row in tables}
    assert {"site", "article", "settings"} <= names
    assert "path" in {row["name"] for row in columns}


def test_execute_returns_rowcount_and_insert_id(tmp_path):
    store = Store(tmp_path / "wordma.db")

    async def scenario():
        inserted = await store.execute(
            "INSERT INTO site (name, description) VALUES (?, ?)", ["Blog", "desc"]
        )
        updated = await store.execute(
            "UPDATE site SET description = ? WHERE name = ?", ["new", "Blog"]
        )
        missing = await store.execute(
            "UPDATE site SET description = ? WHERE name = ?", ["new", "Nope"]
        )
        return inserted, updated, missing

    try:
        inserted, updated, missing = asyncio.run(scenario())
    finally:
        store.close()
    assert inserted == ExecuteResult(rows_affected=1, last_insert_id=1)
    assert updated == ExecuteResult(rows_affected=1, last_insert_id=None)
    assert missing.rows_affected == 0


def test_query_empty_and_factory(tmp_path):
    store = Store(tmp_path / "wordma.db")
    try:
        empty = asyncio.run(store.query("SELECT * FROM site WHERE name = ?", ["x"]))
        articles = asyncio.run(store.query("SELECT * FROM article", factory=Article.from_row))
    finally:
        store.close()
    assert empty == []
    # migration seeds one welcome article
    assert len(articles) == 1
    assert articles[0].title == "Welcome to Wordma"
    assert articles[0].type == "markdown"
    assert articles[0].status == "published"
    assert articles[0].created_at is not None


def test_welcome_article_seeded_once(tmp_path):
    db = tmp_path / "wordma.db"
    for _ in range(2):
        store = Store(db)
        try:
            rows = asyncio.run(store.query("SELECT count(*) AS count FROM article"))
        finally:
            store.close()
    assert rows[0]["count"] == 1


def test_integrity_error_propagates_and_store_stays_usable(tmp_path):
    store = Store(tmp_path / "wordma.db")

    async def scenario():
        await store.execute("INSERT INTO site (name) VALUES (?)", ["Blog"])
        with pytest.raises(sqlite3.IntegrityError):
            await store.execute("INSERT INTO site (name) VALUES (?)", ["Blog"])
        with pytest.raises(sqlite3.IntegrityError):
            await store.execute(
                "INSERT INTO article (title, type) VALUES (?, ?)", ["Bad", "html"]
            )
        return await store.query("SELECT name FROM site")

    try:
        rows = asyncio.run(scenario())
    finally:
        store.close()
    assert [row["name"] for row in rows] == ["Blog"]


def test_store_unavailable_for_directory(tmp_path):
    target = tmp_path / "wordma.db"
    target.mkdir()
    store = Store(target)
    try:
        with pytest.raises(StoreUnavailable) as excinfo:
            asyncio.run(store.query("SELECT * FROM site"))
    finally:
        store.close()
    assert excinfo.value.path == target
    assert not store.is_open


def test_store_unavailable_for_corrupt_file(tmp_path):
    target = tmp_path / "wordma.db"
    target.write_bytes(b"this is not a database" * 100)
    store = Store(target)
    try:
        with pytest.raises(StoreUnavailable):
            asyncio.run(store.connect())
    finally:
        store.close()


def test_upgrade_from_first_schema_version(tmp_path):
    db = tmp_path / "wordma.db"
    conn = sqlite3.connect(db)
    conn.executescript(MIGRATIONS[0])
    conn.execute("PRAGMA user_version = 1")
    conn.execute("INSERT INTO site (name, description) VALUES ('Old', 'kept')")
    conn.commit()
    conn.close()

    store = Store(db)
    try:
        rows = asyncio.run(store.query("SELECT name, path FROM site"))
        version = asyncio.run(store.query("PRAGMA user_version"))[0][0]
    finally:
        store.close()
    assert version == SCHEMA_VERSION
    assert [(row["name"], row["path"]) for row in rows] == [("Old", None)]


def test_store_async_context_manager(tmp_path):
    async def scenario():
        async with Store(tmp_path / "wordma.db") as store:
            assert store.is_open
        return store

    store = asyncio.run(scenario())
    assert not store.is_open
