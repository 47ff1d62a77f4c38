"""Tests for the URL repository."""

import asyncio
import sqlite3

import pytest

from app.core.config import settings
from app.repositories.base import DuplicateEntityError, EntityNotFoundError, StorageFailureError
from app.repositories.url_repository import init_storage
from app.models.url import URL
from tests.utils import create_test_url, random_string, random_url


@pytest.mark.repository
class TestURLRepository:
    """Test suite for URL repository."""

    @pytest.mark.asyncio
    async def test_save_url(self, url_repository):
        """A fresh alias gets a positive id and resolves to its URL."""
        test_url = random_url()

        record_id = await url_repository.save_url(test_url, "testsave")

        assert isinstance(record_id, int)
        assert record_id > 0
        assert await url_repository.get_url("testsave") == test_url

    @pytest.mark.asyncio
    async def test_save_assigns_unique_ids(self, url_repository):
        ids = [
            (await create_test_url(url_repository))[0]
            for _ in range(5)
        ]

        assert len(set(ids)) == 5
        assert all(record_id > 0 for record_id in ids)

    @pytest.mark.asyncio
    async def test_save_duplicate_alias(self, url_repository):
        """The second save under an alias fails and leaves the first intact."""
        _, first_url, alias = await create_test_url(url_repository, alias="duplicate")

        with pytest.raises(DuplicateEntityError) as excinfo:
            await url_repository.save_url(random_url(), alias)

        assert excinfo.value.field_name == "alias"
        assert excinfo.value.value == alias
        assert excinfo.value.model_type is URL
        assert await url_repository.get_url(alias) == first_url
        assert await url_repository.count() == 1

    @pytest.mark.asyncio
    async def test_save_same_url_under_two_aliases(self, url_repository):
        """Only aliases are unique; one URL may be published twice."""
        shared = random_url()

        first = await url_repository.save_url(shared, "first")
        second = await url_repository.save_url(shared, "second")

        assert first != second
        assert await url_repository.get_url("first") == shared
        assert await url_repository.get_url("second") == shared

    @pytest.mark.asyncio
    async def test_get_url_nonexistent(self, url_repository):
        with pytest.raises(EntityNotFoundError) as excinfo:
            await url_repository.get_url("nonexistent")

        assert excinfo.value.value == "nonexistent"

    @pytest.mark.asyncio
    async def test_get_url_is_exact_match(self, url_repository):
        """Lookups do not match prefixes or other letter cases."""
        await create_test_url(url_repository, alias="Exact")

        for alias in ("exact", "Exac", "Exact "):
            with pytest.raises(EntityNotFoundError):
                await url_repository.get_url(alias)

    @pytest.mark.asyncio
    async def test_round_trip_is_byte_identical(self, url_repository):
        urls = {
            "unicode": "https://example.com/ünïcödé/путь?q=✓",
            "query": "https://example.com/a?b=1&c=%20d#frag",
            "spaces": "  https://example.com/padded  ",
            "long": "https://example.com/" + "x" * 4000,
            random_string(12): random_url(),
        }

        for alias, url in urls.items():
            await url_repository.save_url(url, alias)

        for alias, url in urls.items():
            assert await url_repository.get_url(alias) == url

    @pytest.mark.asyncio
    async def test_delete_url(self, url_repository):
        _, _, alias = await create_test_url(url_repository)

        await url_repository.delete_url(alias)

        with pytest.raises(EntityNotFoundError):
            await url_repository.get_url(alias)
        assert await url_repository.count() == 0

    @pytest.mark.asyncio
    async def test_delete_url_nonexistent(self, url_repository):
        """Deleting an unknown alias fails and removes nothing."""
        await create_test_url(url_repository)
        await create_test_url(url_repository)

        with pytest.raises(EntityNotFoundError):
            await url_repository.delete_url("nonexistent")

        assert await url_repository.count() == 2

    @pytest.mark.asyncio
    async def test_delete_only_removes_matching_alias(self, url_repository):
        _, keep_url, keep_alias = await create_test_url(url_repository)
        _, _, drop_alias = await create_test_url(url_repository)

        await url_repository.delete_url(drop_alias)

        assert await url_repository.get_url(keep_alias) == keep_url
        assert await url_repository.count() == 1

    @pytest.mark.asyncio
    async def test_alias_reusable_after_delete(self, url_repository):
        """Replacing a mapping is delete then save."""
        await url_repository.save_url("https://old.example.com", "reuse")
        await url_repository.delete_url("reuse")

        await url_repository.save_url("https://new.example.com", "reuse")

        assert await url_repository.get_url("reuse") == "https://new.example.com"

    @pytest.mark.asyncio
    async def test_full_lifecycle(self, url_repository):
        assert await url_repository.save_url("https://example.com", "ex1") == 1
        assert await url_repository.get_url("ex1") == "https://example.com"

        with pytest.raises(DuplicateEntityError):
            await url_repository.save_url("https://other.com", "ex1")

        await url_repository.delete_url("ex1")

        with pytest.raises(EntityNotFoundError):
            await url_repository.get_url("ex1")
        with pytest.raises(EntityNotFoundError):
            await url_repository.delete_url("ex1")

    @pytest.mark.asyncio
    async def test_concurrent_saves_distinct_aliases(self, url_repository):
        aliases = [f"concurrent{i}" for i in range(10)]

        ids = await asyncio.gather(
            *(url_repository.save_url(f"https://example.com/{alias}", alias) for alias in aliases)
        )

        assert len(set(ids)) == len(aliases)
        for alias in aliases:
            assert await url_repository.get_url(alias) == f"https://example.com/{alias}"

    @pytest.mark.asyncio
    async def test_concurrent_saves_same_alias(self, url_repository):
        """Exactly one of several racing saves for one alias wins."""
        results = await asyncio.gather(
            *(url_repository.save_url(f"https://example.com/{i}", "contested") for i in range(5)),
            return_exceptions=True,
        )

        winners = [result for result in results if isinstance(result, int)]
        losers = [result for result in results if isinstance(result, DuplicateEntityError)]
        assert len(winners) == 1
        assert len(losers) == 4
        assert await url_repository.count() == 1


@pytest.fixture
def held_write_lock(storage_path):
    """Open a second connection that holds the write lock with an uncommitted insert."""
    def hold():
        conn = sqlite3.connect(storage_path, isolation_level=None)
        conn.execute("BEGIN IMMEDIATE")
        conn.execute("INSERT INTO url (url, alias) VALUES (?, ?)", ("https://pending.example.com", "pending"))
        connections.append(conn)

    connections = []
    yield hold
    for conn in connections:
        conn.execute("ROLLBACK")
        conn.close()


@pytest.mark.repository
class TestURLRepositoryLocking:
    """Behaviour while another connection is writing to the same database."""

    @pytest.fixture
    def short_busy_timeout(self, monkeypatch):
        monkeypatch.setattr(settings, "DB_CONNECT_TIMEOUT", 0.2)

    @pytest.mark.asyncio
    async def test_reads_run_alongside_writer(self, short_busy_timeout, storage_path, held_write_lock):
        repository = await init_storage(storage_path)
        try:
            await repository.save_url("https://example.com", "ex1")
            held_write_lock()

            assert await repository.get_url("ex1") == "https://example.com"
            assert await repository.count() == 1
            with pytest.raises(EntityNotFoundError):
                await repository.get_url("pending")
        finally:
            await repository.dispose()

    @pytest.mark.asyncio
    async def test_writes_wait_for_writer(self, short_busy_timeout, storage_path, held_write_lock):
        """A write that cannot get the lock within the busy timeout is a storage failure."""
        repository = await init_storage(storage_path)
        try:
            await repository.save_url("https://example.com", "ex1")
            held_write_lock()

            with pytest.raises(StorageFailureError) as excinfo:
                await repository.save_url("https://other.com", "ex2")
            assert excinfo.value.op == "url_repository.save_url"

            with pytest.raises(StorageFailureError) as excinfo:
                await repository.delete_url("ex1")
            assert excinfo.value.op == "url_repository.delete_url"
        finally:
            await repository.dispose()
