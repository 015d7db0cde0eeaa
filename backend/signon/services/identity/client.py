"""httpx implementation of ProviderClient."""

import logging
from typing import Any, Optional

import httpx

from signon.config import settings
from signon.services.identity.base import ProviderClient, ProviderConfig
from signon.services.identity.errors import ProviderExchangeFailed

logger = logging.getLogger(__name__)


class HttpxProviderClient(ProviderClient):
    """Talks to the provider's token and userinfo endpoints.

    Each call opens a short-lived ``httpx.AsyncClient`` bounded by
    ``OIDC_HTTP_TIMEOUT_SECONDS``. There are no retries: any failure raises
    ``ProviderExchangeFailed``.
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout if timeout is not None else settings.OIDC_HTTP_TIMEOUT_SECONDS
        self._transport = transport

    async def exchange_code(
        self, provider: ProviderConfig, code: str, redirect_uri: str
    ) -> str:
        """Exchange authorization code for an access token."""
        payload = await self._request_json(
            provider,
            "token exchange",
            "POST",
            provider.token_url,
            data={
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": redirect_uri,
                "client_id": provider.client_id,
                "client_secret": provider.client_secret,
            },
            headers={"Accept": "application/json"},
        )

        access_token = payload.get("access_token")
        if not isinstance(access_token, str) or not access_token:
            raise ProviderExchangeFailed(provider.name, "token response has no access_token")
        return access_token

    async def fetch_userinfo(self, provider: ProviderConfig, access_token: str) -> dict:
        """Fetch user info from the provider's userinfo endpoint."""
        return await self._request_json(
            provider,
            "userinfo fetch",
            "GET",
            provider.userinfo_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
        )

    async def _request_json(
        self,
        provider: ProviderConfig,
        step: str,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> dict:
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.request(method, url, **kwargs)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderExchangeFailed(
                provider.name, f"{step} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise ProviderExchangeFailed(provider.name, f"{step} timed out") from exc
        except httpx.HTTPError as exc:
            raise ProviderExchangeFailed(
                provider.name, f"{step} failed: {type(exc).__name__}"
            ) from exc
        except ValueError as exc:
            raise ProviderExchangeFailed(provider.name, f"{step} returned invalid JSON") from exc

        if not isinstance(payload, dict):
            raise ProviderExchangeFailed(provider.name, f"{step} returned a non-object payload")

        logger.debug("OIDC %s succeeded for %s", step, provider.name)
        return payload
