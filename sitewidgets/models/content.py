import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from sitewidgets.database import Base


class ContentStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Content(Base):
    __tablename__ = "content"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    bundle = Column(String, ForeignKey("content_types.machine_name"), nullable=False)
    title = Column(String, index=True, nullable=False)
    slug = Column(String, unique=True, index=True, nullable=True)
    body = Column(Text, nullable=True)
    body_summary = Column(Text, nullable=True)
    status = Column(Enum(ContentStatus), default=ContentStatus.DRAFT, nullable=False)
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    # Optional bundle fields, keyed by field machine name (field_summary, field_theme, ...)
    fields = Column(JSON, default=dict, nullable=False)

    author = relationship("User", back_populates="contents", lazy="selectin")
    content_type = relationship("ContentType")

    __table_args__ = (
        Index("ix_content_bundle_status_created", "bundle", "status", "created_at"),
    )

    @property
    def path(self) -> str:
        """Canonical site-relative path."""
        if self.slug:
            return f"/{self.bundle}/{self.slug}"
        return f"/node/{self.id}"

    def field_value(self, field_name: str):
        return (self.fields or {}).get(field_name)
