"""Pytest configuration and shared fixtures."""

from http.cookies import SimpleCookie
from typing import AsyncGenerator, Optional
from urllib.parse import parse_qs, urlparse

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient, Headers
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from signon.core.database import Base, get_db
from signon.crud.setting import setting_crud
from signon.dependencies import get_provider_client
from signon.main import app
from signon.models.user import User
from signon.services.identity.base import ProviderClient, ProviderConfig
from signon.services.identity.errors import ProviderExchangeFailed
from signon.services.settings_store import OPENID_CONNECT_SETTINGS_KEY, STORE_ACCESS_TOKEN_KEY

# StaticPool so in-memory SQLite shares one connection across the test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

USER_INFO = {
    "sub": "87117114115116",
    "name": "Hans Wurst",
    "email": "h.wurst@finn.de",
    "given_name": "Hans",
    "family_name": "Wurst",
}


@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign keys for SQLite."""
    if hasattr(dbapi_conn, "execute"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class FakeProviderClient(ProviderClient):
    """Network-free ProviderClient returning canned responses."""

    def __init__(self) -> None:
        self.access_token = "foo bar baz"
        self.userinfo = dict(USER_INFO)
        self.fail_exchange = False
        self.fail_userinfo = False
        self.exchanges: list[tuple[str, str, str]] = []
        self.userinfo_tokens: list[str] = []

    async def exchange_code(
        self, provider: ProviderConfig, code: str, redirect_uri: str
    ) -> str:
        self.exchanges.append((provider.name, code, redirect_uri))
        if self.fail_exchange:
            raise ProviderExchangeFailed(provider.name, "token exchange returned HTTP 500")
        return self.access_token

    async def fetch_userinfo(self, provider: ProviderConfig, access_token: str) -> dict:
        self.userinfo_tokens.append(access_token)
        if self.fail_userinfo:
            raise ProviderExchangeFailed(provider.name, "userinfo fetch timed out")
        return dict(self.userinfo)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    import signon.models  # noqa: F401

    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def provider_client() -> FakeProviderClient:
    return FakeProviderClient()


@pytest.fixture(scope="function")
def override_dependencies(db_session: AsyncSession, provider_client: FakeProviderClient):
    """Point the app at the test session and the fake provider client."""

    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_provider_client] = lambda: provider_client
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def async_client(override_dependencies) -> AsyncGenerator[AsyncClient, None]:
    """Async test client; https so Secure cookies round-trip."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="https://testserver",
        follow_redirects=False,
    ) as ac:
        yield ac


@pytest.fixture
def configure_providers(db_session: AsyncSession):
    """Write provider settings the way an administrator would."""

    async def _configure(providers: dict, store_access_token: Optional[bool] = None) -> None:
        await setting_crud.set_value(
            db_session, OPENID_CONNECT_SETTINGS_KEY, {"providers": providers}
        )
        if store_access_token is not None:
            await setting_crud.set_value(db_session, STORE_ACCESS_TOKEN_KEY, store_access_token)

    return _configure


@pytest.fixture
def sign_in(async_client: AsyncClient):
    """Run INITIATE then CALLBACK with the state issued by INITIATE."""

    async def _sign_in(provider: str = "heroku", code: str = "authorization-code"):
        initiate = await async_client.get(f"/auth/{provider}")
        assert initiate.status_code == 302
        state = parse_qs(urlparse(initiate.headers["location"]).query)["state"][0]
        return await async_client.get(
            f"/auth/{provider}/callback", params={"code": code, "state": state}
        )

    return _sign_in


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an active administrator."""
    user = User(
        email="admin@example.com",
        display_name="Admin",
        is_active=True,
        is_admin=True,
        has_logged_in_since_activation=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
def set_cookie_values():
    """Values of every Set-Cookie header for a cookie name, unquoted."""

    def _values(headers, name: str) -> list[str]:
        if isinstance(headers, Headers):
            raw = headers.get_list("set-cookie")
        else:
            raw = headers.getlist("set-cookie")

        values = []
        for header in raw:
            cookie = SimpleCookie()
            cookie.load(header)
            if name in cookie:
                values.append(cookie[name].value)
        return values

    return _values
