"""Exceptions raised by the sign-on flow."""


class AuthenticationError(Exception):
    """Base class for failures of a sign-on attempt."""

    def __init__(self, provider: str, reason: str = "") -> None:
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}" if reason else provider)


class UnknownProvider(AuthenticationError):
    """The provider is not configured at request time; surfaced as HTTP 404."""


class StateMismatch(AuthenticationError):
    """The callback's anti-forgery state does not match the pending request."""


class ProviderExchangeFailed(AuthenticationError):
    """Token exchange or userinfo fetch failed (HTTP, transport, timeout or payload)."""
