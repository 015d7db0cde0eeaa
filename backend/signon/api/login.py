"""Login page listing the currently available identity providers."""

import html

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from signon.api.flash import clear_flash, read_flash
from signon.config import settings
from signon.dependencies import get_provider_registry
from signon.services.identity.registry import ProviderRegistry

router = APIRouter()

_PAGE = """<!DOCTYPE html>
<html>
<head><meta charset="utf-8"><title>Sign in - {app_name}</title></head>
<body>
<h1>Sign in</h1>
{notice}
<ul class="auth-providers">
{providers}
</ul>
</body>
</html>
"""


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    registry: ProviderRegistry = Depends(get_provider_registry),
):
    """Render the provider list; only providers configured right now are shown."""
    providers = await registry.list_available()
    items = "\n".join(
        f'<li><a href="/auth/{html.escape(p.name)}">{html.escape(p.display_name)}</a></li>'
        for p in providers
    )

    notice = read_flash(request)
    notice_html = f'<p class="flash notice">{html.escape(notice)}</p>' if notice else ""

    response = HTMLResponse(
        _PAGE.format(
            app_name=html.escape(settings.APP_NAME),
            notice=notice_html,
            providers=items,
        )
    )
    clear_flash(response)
    return response
