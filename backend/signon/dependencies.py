"""FastAPI dependencies for sessions and the sign-on services."""

from typing import Optional
from uuid import UUID

from fastapi import Cookie, Depends, HTTPException, status
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from signon.config import settings
from signon.core.database import get_db
from signon.core.security import decode_token
from signon.crud.user import user_crud
from signon.models.user import User
from signon.services.identity.base import ProviderClient
from signon.services.identity.client import HttpxProviderClient
from signon.services.identity.flow import AuthFlowController
from signon.services.identity.registry import ProviderRegistry
from signon.services.settings_store import SettingsStore

_provider_client = HttpxProviderClient()


async def get_current_user(
    session_token: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get the user bound to the session cookie.

    Raises:
        HTTPException: 401 if there is no valid session or the account is
            missing or no longer active
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
    )
    if not session_token:
        raise credentials_exception

    try:
        payload = decode_token(session_token, expected_type="session")
        user_id = UUID(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise credentials_exception

    user = await user_crud.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise credentials_exception

    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require an administrator session."""
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user


def get_settings_store(db: AsyncSession = Depends(get_db)) -> SettingsStore:
    return SettingsStore(db)


def get_provider_registry(store: SettingsStore = Depends(get_settings_store)) -> ProviderRegistry:
    return ProviderRegistry(store)


def get_provider_client() -> ProviderClient:
    """Network client used for code exchange; overridden in tests."""
    return _provider_client


def get_flow_controller(
    registry: ProviderRegistry = Depends(get_provider_registry),
    client: ProviderClient = Depends(get_provider_client),
) -> AuthFlowController:
    return AuthFlowController(registry, client)
