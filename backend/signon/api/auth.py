"""OpenID Connect sign-on endpoints: provider redirect and callback."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import RedirectResponse
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from signon.api.flash import ACCOUNT_PENDING_ACTIVATION, AUTHENTICATION_FAILED, set_flash
from signon.config import settings
from signon.core.database import get_db
from signon.core.logging_config import (
    get_logger,
    log_auth_event,
    mask_email,
    mask_subject,
)
from signon.core.security import create_auth_state_token, decode_token
from signon.dependencies import get_flow_controller, get_settings_store
from signon.services.identity.base import AuthRequest
from signon.services.identity.errors import ProviderExchangeFailed, StateMismatch
from signon.services.identity.flow import AuthFlowController
from signon.services.identity.provisioner import LoginOutcome, account_provisioner
from signon.services.identity.session import session_issuer
from signon.services.settings_store import SettingsStore

router = APIRouter()
logger = logging.getLogger(__name__)
audit_logger = get_logger("signon.audit")

_STATE_COOKIE_PATH = "/auth"


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=302)


def _set_state_cookie(response: RedirectResponse, auth_request: AuthRequest) -> None:
    response.set_cookie(
        key=settings.AUTH_STATE_COOKIE_NAME,
        value=create_auth_state_token(
            auth_request.provider_name, auth_request.state, auth_request.redirect_uri
        ),
        httponly=True,
        secure=not settings.DEBUG,
        samesite="lax",  # Sent on the top-level redirect back from the provider
        max_age=settings.AUTH_STATE_EXPIRE_MINUTES * 60,
        path=_STATE_COOKIE_PATH,
    )


def _clear_state_cookie(response: RedirectResponse) -> None:
    response.delete_cookie(key=settings.AUTH_STATE_COOKIE_NAME, path=_STATE_COOKIE_PATH)


def _read_pending_request(request: Request) -> Optional[AuthRequest]:
    """Decode the pending AuthRequest cookie; None if missing, forged or expired."""
    raw = request.cookies.get(settings.AUTH_STATE_COOKIE_NAME)
    if not raw:
        return None
    try:
        payload = decode_token(raw, expected_type="oidc_state")
        return AuthRequest(
            provider_name=payload["provider"],
            state=payload["state"],
            redirect_uri=payload["redirect_uri"],
        )
    except (JWTError, KeyError):
        logger.warning("Discarding invalid sign-on state cookie")
        return None


@router.get("/{provider}")
async def initiate(
    provider: str,
    flow: AuthFlowController = Depends(get_flow_controller),
):
    """Redirect the browser to the provider's authorization endpoint.

    Unknown providers raise ``UnknownProvider`` which is rendered as 404.
    """
    auth_request, authorization_url = await flow.initiate(provider)

    response = _redirect(authorization_url)
    _set_state_cookie(response, auth_request)
    log_auth_event(audit_logger, "auth_initiated", provider)
    return response


@router.get("/{provider}/callback")
async def callback(
    provider: str,
    request: Request,
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    flow: AuthFlowController = Depends(get_flow_controller),
    store: SettingsStore = Depends(get_settings_store),
    db: AsyncSession = Depends(get_db),
):
    """Complete the sign-on round trip started by ``initiate``."""
    pending = _read_pending_request(request)

    try:
        claims, access_token = await flow.callback(provider, code, state, pending, error=error)
    except (StateMismatch, ProviderExchangeFailed) as exc:
        logger.warning("Sign-on via %s failed: %s", provider, exc.reason)
        log_auth_event(audit_logger, "auth_failed", provider, error=type(exc).__name__)
        response = _redirect(settings.LOGIN_PATH)
        set_flash(response, AUTHENTICATION_FAILED)
        _clear_state_cookie(response)
        return response

    user, is_new = await account_provisioner.provision(db, claims, provider)
    outcome = account_provisioner.evaluate(user, is_new)

    if outcome.issues_session:
        destination = (
            settings.FIRST_LOGIN_PATH
            if outcome is LoginOutcome.FIRST_LOGIN
            else settings.POST_LOGIN_PATH
        )
        response = _redirect(destination)
        await session_issuer.issue(
            response,
            db,
            user,
            access_token,
            store_access_token=await store.store_access_token_in_cookie(),
        )
    else:
        response = _redirect(settings.LOGIN_PATH)
        set_flash(response, ACCOUNT_PENDING_ACTIVATION)

    _clear_state_cookie(response)
    log_auth_event(
        audit_logger,
        "auth_completed",
        provider,
        outcome=outcome.value,
        user_id=str(user.id),
        email=mask_email(claims.email),
        subject=mask_subject(claims.subject),
    )
    return response
