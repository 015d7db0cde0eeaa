"""One-shot notices carried to the next page in a cookie."""

from typing import Optional

from fastapi import Request, Response

from signon.config import settings

ACCOUNT_PENDING_ACTIVATION = "account_pending_activation"
AUTHENTICATION_FAILED = "authentication_failed"

# Only keys travel in the cookie; unknown keys are ignored on read
NOTICES = {
    ACCOUNT_PENDING_ACTIVATION: (
        "Your account has been created and is now pending activation by an administrator."
    ),
    AUTHENTICATION_FAILED: "Authentication with the identity provider failed. Please try again.",
}


def set_flash(response: Response, key: str) -> None:
    response.set_cookie(
        key=settings.FLASH_COOKIE_NAME,
        value=key,
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",
        max_age=300,
        path="/",
    )


def read_flash(request: Request) -> Optional[str]:
    """Return the pending notice text, if any."""
    key = request.cookies.get(settings.FLASH_COOKIE_NAME)
    if key is None:
        return None
    return NOTICES.get(key)


def clear_flash(response: Response) -> None:
    response.delete_cookie(key=settings.FLASH_COOKIE_NAME, path="/")
