"""OpenID Connect sign-on flow."""

from signon.services.identity.base import (
    AuthRequest,
    IdentityClaims,
    ProviderClient,
    ProviderConfig,
)
from signon.services.identity.client import HttpxProviderClient
from signon.services.identity.errors import (
    AuthenticationError,
    ProviderExchangeFailed,
    StateMismatch,
    UnknownProvider,
)
from signon.services.identity.flow import AuthFlowController, normalize_claims
from signon.services.identity.provisioner import (
    AccountProvisioner,
    LoginOutcome,
    account_provisioner,
)
from signon.services.identity.registry import ProviderRegistry, build_provider_config
from signon.services.identity.session import Session, SessionIssuer, session_issuer

__all__ = [
    "AuthRequest",
    "IdentityClaims",
    "ProviderClient",
    "ProviderConfig",
    "HttpxProviderClient",
    "AuthenticationError",
    "ProviderExchangeFailed",
    "StateMismatch",
    "UnknownProvider",
    "AuthFlowController",
    "normalize_claims",
    "AccountProvisioner",
    "LoginOutcome",
    "account_provisioner",
    "ProviderRegistry",
    "build_provider_config",
    "Session",
    "SessionIssuer",
    "session_issuer",
]
