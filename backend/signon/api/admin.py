"""Administration endpoints: provider settings and account activation."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from signon.core.database import get_db
from signon.crud.setting import setting_crud
from signon.crud.user import user_crud
from signon.dependencies import get_provider_registry, get_settings_store, require_admin
from signon.models.user import User
from signon.schemas.settings import (
    OpenIDConnectSettings,
    OpenIDConnectSettingsResponse,
    ProviderSummary,
)
from signon.schemas.user import User as UserSchema
from signon.services.identity.provisioner import account_provisioner
from signon.services.identity.registry import ProviderRegistry
from signon.services.settings_store import (
    OPENID_CONNECT_SETTINGS_KEY,
    STORE_ACCESS_TOKEN_KEY,
    SettingsStore,
)

router = APIRouter()
logger = logging.getLogger(__name__)


async def _settings_response(
    registry: ProviderRegistry, store: SettingsStore
) -> OpenIDConnectSettingsResponse:
    providers = await registry.list_available()
    return OpenIDConnectSettingsResponse(
        available=[
            ProviderSummary(
                name=p.name,
                display_name=p.display_name,
                host=p.host,
                client_id=p.client_id,
                scopes=list(p.scopes),
            )
            for p in providers
        ],
        store_access_token_in_cookie=await store.store_access_token_in_cookie(),
    )


@router.get("/settings/openid-connect", response_model=OpenIDConnectSettingsResponse)
async def get_openid_connect_settings(
    admin: User = Depends(require_admin),
    registry: ProviderRegistry = Depends(get_provider_registry),
    store: SettingsStore = Depends(get_settings_store),
):
    """List the providers currently offered on the login page."""
    return await _settings_response(registry, store)


@router.put("/settings/openid-connect", response_model=OpenIDConnectSettingsResponse)
async def update_openid_connect_settings(
    data: OpenIDConnectSettings,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
    registry: ProviderRegistry = Depends(get_provider_registry),
    store: SettingsStore = Depends(get_settings_store),
):
    """Replace the provider configuration; effective on the next request."""
    providers = {
        name: entry.model_dump(exclude_none=True) for name, entry in data.providers.items()
    }
    await setting_crud.set_value(db, OPENID_CONNECT_SETTINGS_KEY, {"providers": providers})
    if data.store_access_token_in_cookie is not None:
        await setting_crud.set_value(
            db, STORE_ACCESS_TOKEN_KEY, data.store_access_token_in_cookie
        )

    logger.info(
        "OpenID Connect settings updated by user_id=%s: providers=%s",
        admin.id,
        sorted(providers),
    )
    return await _settings_response(registry, store)


@router.post("/users/{user_id}/activate", response_model=UserSchema)
async def activate_user(
    user_id: UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Activate an account created by sign-on."""
    user = await user_crud.get_by_id(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if user.is_active:
        return user

    return await account_provisioner.activate(db, user)
