"""Core types of the OpenID Connect sign-on flow."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ProviderConfig:
    """Resolved configuration of one identity provider.

    Endpoints are either absolute URLs or paths on ``https://<host>``.
    ``scopes`` always contains ``openid``.
    """

    name: str
    display_name: str
    host: str
    client_id: str
    client_secret: str = field(repr=False)
    scopes: tuple[str, ...] = ("openid", "email", "profile")
    authorization_endpoint: str = "/authorize"
    token_endpoint: str = "/token"
    userinfo_endpoint: str = "/userinfo"

    def endpoint_url(self, endpoint: str) -> str:
        if endpoint.startswith(("https://", "http://")):
            return endpoint
        return f"https://{self.host}/{endpoint.lstrip('/')}"

    @property
    def authorization_url(self) -> str:
        return self.endpoint_url(self.authorization_endpoint)

    @property
    def token_url(self) -> str:
        return self.endpoint_url(self.token_endpoint)

    @property
    def userinfo_url(self) -> str:
        return self.endpoint_url(self.userinfo_endpoint)


@dataclass(frozen=True)
class AuthRequest:
    """A pending sign-on round trip, created by INITIATE and consumed by CALLBACK."""

    provider_name: str
    state: str = field(repr=False)
    redirect_uri: str


@dataclass(frozen=True)
class IdentityClaims:
    """Normalized identity asserted by a provider after a successful callback."""

    subject: str
    email: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    display_name: Optional[str] = None


class ProviderClient(ABC):
    """Network side of the flow: code exchange and userinfo retrieval.

    Implementations raise ``ProviderExchangeFailed`` for any failure so the
    controller can abort the attempt before anything is persisted.
    """

    @abstractmethod
    async def exchange_code(
        self, provider: ProviderConfig, code: str, redirect_uri: str
    ) -> str:
        """Exchange an authorization code for an access token.

        Returns:
            The raw access-token string issued by the provider
        """

    @abstractmethod
    async def fetch_userinfo(self, provider: ProviderConfig, access_token: str) -> dict:
        """Fetch the userinfo claims payload using the access token."""
