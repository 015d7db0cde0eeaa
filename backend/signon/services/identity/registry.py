"""Resolves provider names against the live settings store."""

import logging
import re
from typing import Any, Optional

from signon.services.identity.base import ProviderConfig
from signon.services.identity.presets import get_preset
from signon.services.settings_store import SettingsStore

logger = logging.getLogger(__name__)

# Provider names are used as URL path segments
PROVIDER_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,49}$")


def _parse_scopes(raw: Any, default: tuple[str, ...]) -> tuple[str, ...]:
    if isinstance(raw, str):
        scopes = raw.split()
    elif isinstance(raw, (list, tuple)):
        scopes = [str(s) for s in raw]
    else:
        scopes = list(default)

    # openid first, no duplicates
    ordered = ["openid"] + [s for s in scopes if s and s != "openid"]
    return tuple(dict.fromkeys(ordered))


def build_provider_config(name: str, entry: Any) -> Optional[ProviderConfig]:
    """Build a ProviderConfig from one ``providers`` settings entry.

    Returns ``None`` when the entry is incomplete: it needs an ``identifier``
    and a ``secret``, and a ``host`` unless ``name`` is a known preset.
    """
    if not PROVIDER_NAME_RE.match(name):
        logger.warning("Provider registry: invalid provider name %r, skipping", name)
        return None
    if not isinstance(entry, dict):
        logger.warning("Provider registry: entry for %r is not a mapping, skipping", name)
        return None

    client_id = entry.get("identifier")
    client_secret = entry.get("secret")
    if not client_id or not client_secret:
        logger.debug("Provider registry: %r has no identifier/secret, skipping", name)
        return None

    preset = get_preset(name)
    host = entry.get("host") or (preset.host if preset else None)
    if not host:
        logger.warning("Provider registry: custom provider %r has no host, skipping", name)
        return None

    if preset is not None:
        defaults = {
            "display_name": preset.display_name,
            "authorization_endpoint": preset.authorization_endpoint,
            "token_endpoint": preset.token_endpoint,
            "userinfo_endpoint": preset.userinfo_endpoint,
        }
        default_scopes = preset.scopes
    else:
        defaults = {
            "display_name": name.replace("_", " ").replace("-", " ").title(),
            "authorization_endpoint": "/authorize",
            "token_endpoint": "/token",
            "userinfo_endpoint": "/userinfo",
        }
        default_scopes = ("openid", "email", "profile")

    return ProviderConfig(
        name=name,
        display_name=entry.get("display_name") or defaults["display_name"],
        host=host,
        client_id=str(client_id),
        client_secret=str(client_secret),
        scopes=_parse_scopes(entry.get("scope"), default_scopes),
        authorization_endpoint=entry.get("authorization_endpoint")
        or defaults["authorization_endpoint"],
        token_endpoint=entry.get("token_endpoint") or defaults["token_endpoint"],
        userinfo_endpoint=entry.get("userinfo_endpoint") or defaults["userinfo_endpoint"],
    )


class ProviderRegistry:
    """Maps provider names to their configuration.

    Every call reads a fresh snapshot from the settings store, so enabling
    or disabling a provider takes effect on the next request. Providers that
    are not listed by ``list_available`` cannot be resolved either.
    """

    def __init__(self, store: SettingsStore) -> None:
        self._store = store

    async def _configured(self) -> dict:
        providers = (await self._store.openid_connect()).get("providers") or {}
        if not isinstance(providers, dict):
            logger.warning("Provider registry: 'providers' setting is not a mapping")
            return {}
        return providers

    async def resolve(self, name: str) -> Optional[ProviderConfig]:
        """Return the provider's configuration, or ``None`` if it is not available."""
        providers = await self._configured()
        if name not in providers:
            return None
        return build_provider_config(name, providers[name])

    async def list_available(self) -> list[ProviderConfig]:
        """All currently resolvable providers, ordered by name."""
        providers = await self._configured()
        configs = []
        for name in sorted(providers):
            config = build_provider_config(name, providers[name])
            if config is not None:
                configs.append(config)
        return configs
