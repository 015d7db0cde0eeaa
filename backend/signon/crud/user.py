"""CRUD operations for users."""

from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from signon.core.database import utcnow
from signon.models.user import User


class UserCRUD:
    """CRUD operations for User model."""

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> Optional[User]:
        """Get user by email."""
        result = await db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def create(
        db: AsyncSession,
        email: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        display_name: Optional[str] = None,
        identity_provider: Optional[str] = None,
        identity_subject: Optional[str] = None,
    ) -> User:
        """Create a new, inactive user.

        Raises:
            IntegrityError: if a user with this email already exists
        """
        user = User(
            email=email,
            first_name=first_name,
            last_name=last_name,
            display_name=display_name,
            identity_provider=identity_provider,
            identity_subject=identity_subject,
            is_active=False,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def activate(db: AsyncSession, user: User) -> User:
        """Activate a user; the next successful sign-on counts as a first login."""
        user.is_active = True
        user.activated_at = utcnow()
        user.has_logged_in_since_activation = False
        await db.commit()
        await db.refresh(user)
        return user

    @staticmethod
    async def record_login(db: AsyncSession, user: User) -> None:
        """Update user's last login timestamp and first-login marker."""
        user.last_login_at = utcnow()
        user.has_logged_in_since_activation = True
        await db.commit()


user_crud = UserCRUD()
