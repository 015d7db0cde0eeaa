"""User (account) model."""

import uuid

from sqlalchemy import Boolean, Column, DateTime, String, Uuid

from signon.core.database import Base, utcnow


class User(Base):
    """Local account provisioned from an OpenID Connect identity.

    Accounts are resolved by email; ``email`` is unique so two racing first
    logins cannot both insert a row.
    """

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    first_name = Column(String(100))
    last_name = Column(String(100))
    display_name = Column(String(255))

    # Provider and subject seen when the account was provisioned
    identity_provider = Column(String(50), nullable=True)
    identity_subject = Column(String(255), nullable=True)

    # New accounts stay locked until an administrator activates them
    is_active = Column(Boolean, default=False, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    # Reset on activation; drives the first-login landing page
    has_logged_in_since_activation = Column(Boolean, default=False, nullable=False)

    activated_at = Column(DateTime, nullable=True)
    last_login_at = Column(DateTime)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.id} active={self.is_active}>"
