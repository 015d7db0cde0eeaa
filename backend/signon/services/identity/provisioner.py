"""Find-or-create accounts and apply the activation gate."""

import enum
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from signon.crud.user import user_crud
from signon.models.user import User
from signon.services.identity.base import IdentityClaims
from signon.core.logging_config import mask_email

logger = logging.getLogger(__name__)


class LoginOutcome(str, enum.Enum):
    """Result of a successful callback once the account is known."""

    ACCOUNT_CREATED = "account_created"
    PENDING_ACTIVATION = "pending_activation"
    FIRST_LOGIN = "first_login"
    LOGIN = "login"

    @property
    def issues_session(self) -> bool:
        return self in (LoginOutcome.FIRST_LOGIN, LoginOutcome.LOGIN)


class AccountProvisioner:
    """Resolves IdentityClaims to exactly one local account per email."""

    async def provision(
        self, db: AsyncSession, claims: IdentityClaims, provider_name: str
    ) -> tuple[User, bool]:
        """Return ``(user, is_new)``.

        Existing accounts are returned unchanged; claims never overwrite them.
        New accounts are always created inactive.
        """
        user = await user_crud.get_by_email(db, claims.email)
        if user is not None:
            return user, False

        try:
            user = await user_crud.create(
                db,
                email=claims.email,
                first_name=claims.given_name,
                last_name=claims.family_name,
                display_name=claims.display_name,
                identity_provider=provider_name,
                identity_subject=claims.subject,
            )
        except IntegrityError:
            # Another request created the account first
            await db.rollback()
            user = await user_crud.get_by_email(db, claims.email)
            if user is None:
                raise
            logger.info(
                "Concurrent provisioning for %s resolved to existing account",
                mask_email(claims.email),
            )
            return user, False

        logger.info(
            "Provisioned inactive account from %s: user_id=%s email=%s",
            provider_name,
            user.id,
            mask_email(claims.email),
        )
        return user, True

    @staticmethod
    def evaluate(user: User, is_new: bool) -> LoginOutcome:
        """Apply the activation gate to a provisioned account."""
        if is_new:
            return LoginOutcome.ACCOUNT_CREATED
        if not user.is_active:
            return LoginOutcome.PENDING_ACTIVATION
        if not user.has_logged_in_since_activation:
            return LoginOutcome.FIRST_LOGIN
        return LoginOutcome.LOGIN

    async def activate(self, db: AsyncSession, user: User) -> User:
        """Activate an account on behalf of an administrator."""
        user = await user_crud.activate(db, user)
        logger.info("Activated account user_id=%s", user.id)
        return user


account_provisioner = AccountProvisioner()
