from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, String

from sitewidgets.database import Base


class ConfigObject(Base):
    """Named configuration object, e.g. ``suite.settings``."""

    __tablename__ = "config_objects"

    name = Column(String, primary_key=True)
    data = Column(JSON, default=dict, nullable=False)
    updated_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )
