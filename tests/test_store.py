"""Tests for the document stores."""

import json

import pytest

from loyalty_pro.models import Admin, Customer, HistoryEntry
from loyalty_pro.store import DB_KEY, JSONFileStore, MemoryStore


@pytest.fixture
def table():
    """A table with one admin and one customer."""
    return {
        "bob": Admin(
            username="bob",
            password_hash="$2b$04$abcdefghijklmnopqrstuuJ0Zq6l3C7b8w1Xo4YQm1kS5b0lZl1xW",
            name="Bob's Shop",
            customers=[
                Customer(
                    mobile="9999999999",
                    name="Asha",
                    pin="1234",
                    points=10,
                    total_spent=100.0,
                    history=[HistoryEntry(date="2026-01-05T10:00:00Z", bill=100, points=10)],
                )
            ],
        )
    }


class TestMemoryStore:
    """Tests for MemoryStore."""

    @pytest.mark.asyncio
    async def test_empty_on_first_run(self):
        """Test loading before any save yields an empty table."""
        assert await MemoryStore().load() == {}

    @pytest.mark.asyncio
    async def test_save_then_load(self, table):
        """Test a saved table loads back equal."""
        store = MemoryStore()
        await store.save(table)

        assert await store.load() == table

    @pytest.mark.asyncio
    async def test_document_uses_fixed_key_and_camel_case(self, table):
        """Test the document is stored under the fixed key with camelCase field names."""
        store = MemoryStore()
        await store.save(table)

        document = json.loads(store.blobs[DB_KEY])
        bob = document["bob"]
        assert bob["passwordHash"].startswith("$2b$")
        assert bob["customers"][0]["totalSpent"] == 100.0
        assert bob["customers"][0]["history"][0]["points"] == 10

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "blob",
        [b"{not json", b"null", b"[]", b'{"bob": {"username": "bob"}}'],
    )
    async def test_corrupt_document_loads_empty(self, blob):
        """Test malformed content degrades to an empty table."""
        store = MemoryStore(blobs={DB_KEY: blob})

        assert await store.load() == {}

    @pytest.mark.asyncio
    async def test_corrupt_document_is_replaced_on_save(self, table):
        """Test the next save overwrites a corrupt document."""
        store = MemoryStore(blobs={DB_KEY: b"{not json"})
        await store.save(table)

        assert await store.load() == table

    @pytest.mark.asyncio
    async def test_save_of_load_is_a_no_op(self, table):
        """Test re-saving a loaded table leaves the document byte-identical."""
        store = MemoryStore()
        await store.save(table)
        before = store.blobs[DB_KEY]

        await store.save(await store.load())

        assert store.blobs[DB_KEY] == before


class TestJSONFileStore:
    """Tests for JSONFileStore."""

    @pytest.mark.asyncio
    async def test_missing_file_loads_empty(self, tmp_path):
        """Test a missing file is an empty table."""
        store = JSONFileStore(tmp_path / "missing.json")

        assert await store.load() == {}

    @pytest.mark.asyncio
    async def test_round_trip(self, tmp_path, table):
        """Test saving and loading through the file."""
        path = tmp_path / "nested" / "ledger.json"
        store = JSONFileStore(path)

        await store.save(table)

        assert path.exists()
        assert await JSONFileStore(path).load() == table

    @pytest.mark.asyncio
    async def test_save_of_load_is_a_no_op(self, tmp_path, table):
        """Test re-saving a loaded table leaves the file byte-identical."""
        path = tmp_path / "ledger.json"
        store = JSONFileStore(path)
        await store.save(table)
        before = path.read_bytes()

        await store.save(await store.load())

        assert path.read_bytes() == before

    @pytest.mark.asyncio
    async def test_corrupt_file_loads_empty(self, tmp_path):
        """Test a corrupt file degrades to an empty table."""
        path = tmp_path / "ledger.json"
        path.write_text("{{{")

        assert await JSONFileStore(path).load() == {}

    @pytest.mark.asyncio
    async def test_save_leaves_no_temp_files(self, tmp_path, table):
        """Test the atomic replace cleans up after itself."""
        store = JSONFileStore(tmp_path / "ledger.json")
        await store.save(table)
        await store.save(table)

        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_path_defaults_to_settings(self, monkeypatch, tmp_path):
        """Test the store path falls back to LEDGER_STORE_PATH."""
        from loyalty_pro.config.settings import get_settings

        monkeypatch.setenv("LEDGER_STORE_PATH", str(tmp_path / "from_env.json"))
        get_settings.cache_clear()
        try:
            store = JSONFileStore()
        finally:
            get_settings.cache_clear()

        assert store.path == tmp_path / "from_env.json"

    @pytest.mark.asyncio
    async def test_directory_path_loads_empty(self, tmp_path):
        """Test an unreadable path degrades to an empty table."""
        path = tmp_path / "ledger.json"
        path.mkdir()

        assert await JSONFileStore(path).load() == {}


class TestUnmodelledKeys:
    """Tests for documents carrying keys the ledger does not model."""

    @pytest.mark.asyncio
    async def test_extra_keys_survive_a_rewrite(self, table):
        """Test re-saving a loaded document keeps unknown admin, customer and history keys."""
        store = MemoryStore()
        await store.save(table)
        document = json.loads(store.blobs[DB_KEY])
        document["bob"]["email"] = "bob@example.com"
        document["bob"]["customers"][0]["birthday"] = "1990-02-01"
        document["bob"]["customers"][0]["history"][0]["note"] = "first visit"
        store.blobs[DB_KEY] = json.dumps(document).encode()

        await store.save(await store.load())

        rewritten = json.loads(store.blobs[DB_KEY])
        assert rewritten["bob"]["email"] == "bob@example.com"
        assert rewritten["bob"]["customers"][0]["birthday"] == "1990-02-01"
        assert rewritten["bob"]["customers"][0]["history"][0]["note"] == "first visit"
