from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Integer, String

from sitewidgets.database import Base


class BlockInstance(Base):
    """A placed widget: which plugin renders it and its saved configuration."""

    __tablename__ = "block_instances"

    id = Column(Integer, primary_key=True, index=True)
    plugin_id = Column(String, nullable=False, index=True)
    label = Column(String, nullable=False)
    settings = Column(JSON, default=dict, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self):
        return f"<BlockInstance(id={self.id}, plugin={self.plugin_id})>"
