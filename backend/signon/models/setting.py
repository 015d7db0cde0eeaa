"""Mutable runtime settings store."""

from sqlalchemy import JSON, Column, DateTime, String

from signon.core.database import Base, utcnow


class ApplicationSetting(Base):
    """One runtime setting, stored as a JSON value under a unique key.

    Rows are written by administrators (or any external process) and read
    fresh on every request, e.g.::

        key="plugin_openid_connect",
        value={"providers": {"google": {"identifier": "...", "secret": "..."}}}
    """

    __tablename__ = "application_settings"

    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<ApplicationSetting key={self.key!r}>"
