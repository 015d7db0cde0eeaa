"""Endpoint defaults for well-known OpenID Connect providers."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ProviderPreset:
    display_name: str
    host: str
    authorization_endpoint: str
    token_endpoint: str
    userinfo_endpoint: str
    scopes: tuple[str, ...] = ("openid", "email", "profile")


PRESETS: dict[str, ProviderPreset] = {
    "google": ProviderPreset(
        display_name="Google",
        host="accounts.google.com",
        authorization_endpoint="/o/oauth2/v2/auth",
        token_endpoint="https://oauth2.googleapis.com/token",
        userinfo_endpoint="https://openidconnect.googleapis.com/v1/userinfo",
    ),
    "heroku": ProviderPreset(
        display_name="Heroku",
        host="connect-op.herokuapp.com",
        authorization_endpoint="/authorizations/new",
        token_endpoint="/access_tokens",
        userinfo_endpoint="/userinfo",
    ),
}


def get_preset(name: str) -> Optional[ProviderPreset]:
    return PRESETS.get(name)
