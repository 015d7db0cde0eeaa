"""Security utilities: signed session and sign-on state tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from jose import JWTError, jwt

from signon.config import settings


def _encode(data: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({"exp": datetime.now(timezone.utc) + expires_delta, "type": token_type})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_session_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create the signed application session token.

    Args:
        user_id: ID of the account the session is bound to
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT session token
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.SESSION_EXPIRE_MINUTES)
    return _encode({"sub": user_id}, "session", expires_delta)


def create_auth_state_token(provider: str, state: str, redirect_uri: str) -> str:
    """
    Create a short-lived token carrying a pending sign-on request.

    The token travels in a cookie between INITIATE and CALLBACK so that the
    anti-forgery state never has to be stored server side.
    """
    return _encode(
        {"provider": provider, "state": state, "redirect_uri": redirect_uri},
        "oidc_state",
        timedelta(minutes=settings.AUTH_STATE_EXPIRE_MINUTES),
    )


def decode_token(token: str, expected_type: Optional[str] = None) -> dict[str, Any]:
    """
    Decode and verify a JWT token.

    Args:
        token: JWT token to decode
        expected_type: When given, the ``type`` claim must match it

    Returns:
        Decoded token payload

    Raises:
        JWTError: If token is invalid, expired or of the wrong type
    """
    payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    if expected_type is not None and payload.get("type") != expected_type:
        raise JWTError(f"Expected {expected_type} token, got {payload.get('type')}")
    return payload
