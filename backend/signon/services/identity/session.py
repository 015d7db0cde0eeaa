"""Establishes the application session after sign-on."""

import logging
from dataclasses import dataclass, field
from typing import Optional
from uuid import UUID

from fastapi import Response
from sqlalchemy.ext.asyncio import AsyncSession

from signon.config import settings
from signon.core.security import create_session_token
from signon.crud.user import user_crud
from signon.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Application session bound to one active account."""

    user_id: UUID
    access_token: Optional[str] = field(default=None, repr=False)


class SessionIssuer:
    """Writes the session cookies onto the outgoing response."""

    async def issue(
        self,
        response: Response,
        db: AsyncSession,
        user: User,
        access_token: str,
        store_access_token: bool = False,
    ) -> Session:
        """Bind a new session to ``user``.

        When ``store_access_token`` is set, the provider's raw access token is
        written verbatim into a session-scoped cookie. It is never written to
        the database.

        Raises:
            ValueError: if the account is not active
        """
        if not user.is_active:
            raise ValueError(f"Refusing to issue a session for inactive user {user.id}")

        response.set_cookie(
            key=settings.SESSION_COOKIE_NAME,
            value=create_session_token(str(user.id)),
            httponly=True,
            secure=not settings.DEBUG,
            samesite="lax",
            max_age=settings.SESSION_EXPIRE_MINUTES * 60,
            path="/",
        )

        if store_access_token:
            # No max_age: the cookie lives as long as the browser session
            response.set_cookie(
                key=settings.ACCESS_TOKEN_COOKIE_NAME,
                value=access_token,
                httponly=True,
                secure=not settings.DEBUG,
                samesite="lax",
                path="/",
            )
        else:
            response.delete_cookie(key=settings.ACCESS_TOKEN_COOKIE_NAME, path="/")

        await user_crud.record_login(db, user)
        logger.info("Session issued for user_id=%s", user.id)

        return Session(user_id=user.id, access_token=access_token if store_access_token else None)


session_issuer = SessionIssuer()
