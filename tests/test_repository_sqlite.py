"""
User store against a real engine (in-memory SQLite via aiosqlite).
"""

import pytest
import pytest_asyncio
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from database.models import Base
from database.repository import DuplicateUserError, SqlAlchemyUserRepository


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def repo(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield SqlAlchemyUserRepository(session)


class TestSchema:
    @pytest.mark.asyncio
    async def test_create_all_builds_users_table(self, engine):
        async with engine.connect() as conn:
            columns = await conn.run_sync(
                lambda sync_conn: {c["name"] for c in inspect(sync_conn).get_columns("users")}
            )
        assert {"user_id", "username", "email", "password_hash", "reset_token", "reset_token_expiry"} <= columns


class TestUniqueness:
    @pytest.mark.asyncio
    async def test_duplicate_username_rejected_by_store(self, repo):
        await repo.create("alice", "alice@x.com", "h")
        with pytest.raises(DuplicateUserError):
            await repo.create("alice", "other@x.com", "h")
        assert [u.username for u in await repo.list_all()] == ["alice"]

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_by_store(self, repo):
        await repo.create("alice", "alice@x.com", "h")
        with pytest.raises(DuplicateUserError):
            await repo.create("bob", "alice@x.com", "h")
        assert len(await repo.list_all()) == 1

    @pytest.mark.asyncio
    async def test_store_usable_after_rejected_insert(self, repo):
        await repo.create("alice", "alice@x.com", "h")
        with pytest.raises(DuplicateUserError):
            await repo.create("alice", "alice@x.com", "h")
        bob = await repo.create("bob", "bob@x.com", "h")
        assert (await repo.find_by_username("bob")).user_id == bob.user_id


class TestLookups:
    @pytest.mark.asyncio
    async def test_find_by_username_or_email(self, repo):
        alice = await repo.create("alice", "alice@x.com", "h")

        assert (await repo.find_by_username_or_email("alice", "nobody@x.com")).user_id == alice.user_id
        assert (await repo.find_by_username_or_email("nobody", "alice@x.com")).user_id == alice.user_id
        assert await repo.find_by_username_or_email("nobody", "nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_reset_token_lookup_misses_after_replacement(self, repo):
        alice = await repo.create("alice", "alice@x.com", "h")
        alice.reset_token = "first-token"
        await repo.save(alice)
        alice.reset_token = "second-token"
        await repo.save(alice)

        assert await repo.find_by_email_and_reset_token("alice@x.com", "first-token") is None
        found = await repo.find_by_email_and_reset_token("alice@x.com", "second-token")
        assert found.user_id == alice.user_id
        assert await repo.find_by_email_and_reset_token("bob@x.com", "second-token") is None

    @pytest.mark.asyncio
    async def test_get_by_id(self, repo):
        alice = await repo.create("alice", "alice@x.com", "h")
        assert (await repo.get_by_id(str(alice.user_id))).username == "alice"
