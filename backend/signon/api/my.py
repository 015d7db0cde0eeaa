"""Post-login landing pages."""

from fastapi import APIRouter, Depends

from signon.dependencies import get_current_user
from signon.models.user import User
from signon.schemas.user import User as UserSchema

router = APIRouter()


@router.get("/first_login", response_model=UserSchema)
async def first_login(current_user: User = Depends(get_current_user)):
    """Landing page for the first sign-on after activation."""
    return current_user


@router.get("/page", response_model=UserSchema)
async def my_page(current_user: User = Depends(get_current_user)):
    """Regular post-login landing page."""
    return current_user
