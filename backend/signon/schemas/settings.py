"""Runtime settings Pydantic schemas."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from signon.services.identity.registry import PROVIDER_NAME_RE


class ProviderSettings(BaseModel):
    """One entry of the ``providers`` mapping."""

    identifier: str = Field(..., min_length=1)
    secret: str = Field(..., min_length=1)
    display_name: Optional[str] = None
    host: Optional[str] = None
    scope: Optional[str] = Field(None, description="Space-delimited scopes; openid is always added")
    authorization_endpoint: Optional[str] = None
    token_endpoint: Optional[str] = None
    userinfo_endpoint: Optional[str] = None

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and ("/" in v or not v.strip()):
            raise ValueError("host must be a bare host name, e.g. login.example.com")
        return v


class OpenIDConnectSettings(BaseModel):
    """Full OpenID Connect settings block as written by administrators."""

    providers: dict[str, ProviderSettings] = Field(default_factory=dict)
    store_access_token_in_cookie: Optional[bool] = None

    @field_validator("providers")
    @classmethod
    def validate_provider_names(
        cls, v: dict[str, ProviderSettings]
    ) -> dict[str, ProviderSettings]:
        invalid = sorted(name for name in v if not PROVIDER_NAME_RE.match(name))
        if invalid:
            raise ValueError(
                f"invalid provider name(s) {invalid}: use lowercase letters, digits, "
                "'-' and '_', starting with a letter or digit"
            )
        return v


class ProviderSummary(BaseModel):
    """Provider as shown in admin listings (never includes the secret)."""

    name: str
    display_name: str
    host: str
    client_id: str
    scopes: list[str]


class OpenIDConnectSettingsResponse(BaseModel):
    available: list[ProviderSummary]
    store_access_token_in_cookie: bool
