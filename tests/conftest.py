# tests/conftest.py
import os

# Settings are read at import time; keep tests off any local .env database
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./.pytest-edumanage.db"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key-with-enough-length-1234"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Iterable, Optional

import fakeredis
import pytest
from httpx import ASGITransport, AsyncClient

from edumanage import create_app
from edumanage.core.cache import QueryCache, get_query_cache
from edumanage.core.database import build_engine, build_session_factory, get_db, init_db
from edumanage.core.dependencies import get_identity_store
from edumanage.core.security import create_access_token
from edumanage.models import Profile, School, UserRole
from edumanage.schemas.enums import AppRole
from edumanage.services.identity_service import IdentityStore

DEFAULT_PASSWORD = "secret123"


@pytest.fixture
async def engine(tmp_path):
    """A fresh SQLite database file per test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'edumanage-test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def identity_store(session_factory):
    return IdentityStore(session_factory)


@pytest.fixture
def redis_server():
    """In-memory Redis server; clients created against it share data"""
    return fakeredis.FakeServer()


@pytest.fixture
async def redis_client(redis_server):
    client = fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def cache(redis_client):
    return QueryCache(redis_client, ttl_seconds=300)


@pytest.fixture
def make_app(session_factory, identity_store):
    """Factory for app instances; each one stands in for a separate worker process"""
    def _make(query_cache: QueryCache):
        app = create_app()

        async def override_get_db():
            async with session_factory() as session:
                yield session

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_identity_store] = lambda: identity_store
        app.dependency_overrides[get_query_cache] = lambda: query_cache
        return app

    return _make


@pytest.fixture
def app(make_app, cache):
    return make_app(cache)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def make_school(session_factory):
    """Factory for committed schools"""
    async def _make(name: str = "Springfield High", slug: Optional[str] = None) -> School:
        async with session_factory() as session:
            school = School(
                name=name,
                slug=slug or name.lower().replace(" ", "-"),
                email=f"office@{(slug or name.lower().replace(' ', '-'))}.edu"
            )
            session.add(school)
            await session.commit()
            return school

    return _make


@pytest.fixture
def make_user(session_factory, identity_store):
    """Factory for users with an identity, a profile and optional role grants"""
    async def _make(
        email: str,
        school_id: Optional[str] = None,
        roles: Iterable[AppRole] = (),
        full_name: str = "Test User"
    ) -> str:
        identity = await identity_store.create_identity(email, DEFAULT_PASSWORD, full_name=full_name)
        async with session_factory() as session:
            profile = await session.get(Profile, identity.id)
            profile.school_id = school_id
            for role in roles:
                session.add(UserRole(user_id=identity.id, role=role, school_id=school_id))
            await session.commit()
        return identity.id

    return _make


def auth_headers(user_id: str, email: str = "user@example.com") -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id, email)}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
async def school(make_school):
    return await make_school()


@pytest.fixture
async def admin(make_user, school):
    """School admin of the default school; returns (user_id, headers)"""
    user_id = await make_user("admin@springfield.edu", school.id, [AppRole.SCHOOL_ADMIN], "Seymour Skinner")
    return user_id, auth_headers(user_id, "admin@springfield.edu")


@pytest.fixture
async def teacher(make_user, school):
    user_id = await make_user("teacher@springfield.edu", school.id, [AppRole.TEACHER], "Edna Krabappel")
    return user_id, auth_headers(user_id, "teacher@springfield.edu")


@pytest.fixture
async def parent(make_user, school):
    user_id = await make_user("parent@springfield.edu", school.id, [AppRole.PARENT], "Marge Simpson")
    return user_id, auth_headers(user_id, "parent@springfield.edu")
