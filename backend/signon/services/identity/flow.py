"""Drives the authorization-code round trip."""

import hmac
import logging
import secrets
from typing import Any, Optional
from urllib.parse import urlencode

from signon.config import settings
from signon.services.identity.base import (
    AuthRequest,
    IdentityClaims,
    ProviderClient,
    ProviderConfig,
)
from signon.services.identity.errors import (
    ProviderExchangeFailed,
    StateMismatch,
    UnknownProvider,
)
from signon.services.identity.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def build_authorization_url(provider: ProviderConfig, auth_request: AuthRequest) -> str:
    """Provider authorization URL for the given pending request."""
    params = {
        "response_type": "code",
        "client_id": provider.client_id,
        "redirect_uri": auth_request.redirect_uri,
        "scope": " ".join(provider.scopes),
        "state": auth_request.state,
    }
    return f"{provider.authorization_url}?{urlencode(params)}"


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_claims(provider_name: str, payload: dict) -> IdentityClaims:
    """Turn a userinfo payload into IdentityClaims.

    Raises:
        ProviderExchangeFailed: if ``sub`` or ``email`` is missing
    """
    subject = _clean(payload.get("sub"))
    email = _clean(payload.get("email"))
    if subject is None or email is None or "@" not in email:
        raise ProviderExchangeFailed(provider_name, "userinfo lacks sub or email claim")

    given_name = _clean(payload.get("given_name"))
    family_name = _clean(payload.get("family_name"))
    display_name = _clean(payload.get("name"))
    if display_name is None:
        display_name = " ".join(n for n in (given_name, family_name) if n) or None

    return IdentityClaims(
        subject=subject,
        email=email.lower(),
        given_name=given_name,
        family_name=family_name,
        display_name=display_name,
    )


class AuthFlowController:
    """Two-step sign-on state machine.

    ``initiate`` builds the provider redirect without any network I/O.
    ``callback`` verifies the anti-forgery state, then exchanges the code and
    fetches userinfo. Nothing is persisted here; callers provision the
    account only once ``callback`` has returned.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        client: ProviderClient,
        base_url: Optional[str] = None,
    ) -> None:
        self.registry = registry
        self.client = client
        self.base_url = (base_url or settings.APP_BASE_URL).rstrip("/")

    def redirect_uri(self, provider_name: str) -> str:
        return f"{self.base_url}/auth/{provider_name}/callback"

    async def _resolve(self, provider_name: str) -> ProviderConfig:
        provider = await self.registry.resolve(provider_name)
        if provider is None:
            raise UnknownProvider(provider_name, "not configured")
        return provider

    async def initiate(self, provider_name: str) -> tuple[AuthRequest, str]:
        """Start a sign-on round trip.

        Returns:
            The pending AuthRequest and the provider authorization URL

        Raises:
            UnknownProvider: if the provider is not currently configured
        """
        provider = await self._resolve(provider_name)
        auth_request = AuthRequest(
            provider_name=provider.name,
            state=secrets.token_urlsafe(32),
            redirect_uri=self.redirect_uri(provider.name),
        )
        logger.info("OIDC sign-on initiated for provider %s", provider.name)
        return auth_request, build_authorization_url(provider, auth_request)

    async def callback(
        self,
        provider_name: str,
        code: Optional[str],
        state: Optional[str],
        pending: Optional[AuthRequest],
        error: Optional[str] = None,
    ) -> tuple[IdentityClaims, str]:
        """Complete a sign-on round trip.

        Args:
            provider_name: Provider from the callback URL
            code: Authorization code returned by the provider
            state: State returned by the provider
            pending: AuthRequest issued by ``initiate`` (None if absent or expired)
            error: ``error`` parameter returned by the provider, if any

        Returns:
            Tuple of (claims, raw access token)

        Raises:
            UnknownProvider: provider no longer configured
            StateMismatch: state missing or different from the issued one
            ProviderExchangeFailed: provider error, code exchange or userinfo failure
        """
        provider = await self._resolve(provider_name)

        if pending is None:
            raise StateMismatch(provider_name, "no pending sign-on request")
        if pending.provider_name != provider_name:
            raise StateMismatch(provider_name, "pending request belongs to another provider")
        if not state or not hmac.compare_digest(pending.state.encode(), state.encode()):
            raise StateMismatch(provider_name, "state does not match")

        if error:
            raise ProviderExchangeFailed(provider_name, f"provider returned error {error!r}")
        if not code:
            raise ProviderExchangeFailed(provider_name, "callback carries no authorization code")

        access_token = await self.client.exchange_code(provider, code, pending.redirect_uri)
        payload = await self.client.fetch_userinfo(provider, access_token)
        claims = normalize_claims(provider_name, payload)

        logger.info("OIDC callback succeeded for provider %s", provider_name)
        return claims, access_token
