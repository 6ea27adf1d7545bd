"""Shared test fixtures - uses async SQLite for isolated testing."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from stylesync.api.deps import get_card_cache
from stylesync.config import settings
from stylesync.db.database import Base, get_db
from stylesync.models.user_profile import UserProfile
from stylesync.services.card_cache import MemoryCardProfileCache
from stylesync.services.card_profile_service import CardProfileService
from stylesync.services.profile_store import ProfileStore
from stylesync.services.relationship_service import RelationshipService
from stylesync.services.relationship_store import RelationshipStore

# In-memory SQLite for tests (no Docker needed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///file::memory:?cache=shared&uri=true"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


async def _override_get_db():
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: datetime = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def _bearer_headers(public_id: str, expires_in: timedelta = timedelta(hours=1)) -> dict:
    """Bearer header carrying a signed token for ``public_id``."""
    token = jwt.encode(
        {"publicId": public_id, "exp": datetime.now(timezone.utc) + expires_in},
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(autouse=True)
async def setup_db():
    """Create all tables before each test, drop after."""
    # Import all models so Base.metadata knows about them
    import stylesync.models  # noqa: F401

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def db():
    """Direct async DB session for service-level tests."""
    async with test_session_factory() as session:
        yield session
        await session.commit()


@pytest.fixture
def make_profile():
    """Factory that commits a user profile in its own session."""

    async def _make(
        username: str,
        *,
        public_id: str | None = None,
        is_public: bool = True,
        interests: list[str] | None = None,
        display_name: str | None = None,
    ) -> UserProfile:
        profile = UserProfile(
            public_id=public_id or f"pub_{username}",
            username=username,
            display_name=display_name,
            interests=interests or [],
            is_public=is_public,
        )
        async with test_session_factory() as session:
            session.add(profile)
            await session.commit()
        return profile

    return _make


@pytest.fixture
def auth_headers():
    """Factory for signed bearer headers, e.g. ``auth_headers("pub_alice")``."""
    return _bearer_headers


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return MemoryCardProfileCache(timedelta(hours=24), clock)


@pytest.fixture
def cards(db, cache):
    return CardProfileService(RelationshipStore(db), ProfileStore(db), cache)


@pytest.fixture
def relationships(db, cards):
    return RelationshipService(db, cards)


@pytest.fixture
async def client(cache):
    """Async HTTP test client with test DB and in-memory card cache."""
    from stylesync.main import app

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_card_cache] = lambda: cache
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
