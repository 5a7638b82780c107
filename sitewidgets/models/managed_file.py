"""
Managed File Model

Uploads start as temporary files and are promoted to permanent once a
saved configuration references them.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, DateTime, Enum, Index, Integer, String

from sitewidgets.database import Base


class FileStatus(str, enum.Enum):
    TEMPORARY = "temporary"
    PERMANENT = "permanent"


class ManagedFile(Base):
    __tablename__ = "managed_files"

    id = Column(Integer, primary_key=True, index=True)
    uri = Column(String, nullable=False, unique=True)  # public://executives/abc.png
    filename = Column(String, nullable=False)
    mime_type = Column(String, nullable=False)
    file_size = Column(BigInteger, nullable=False, default=0)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    status = Column(Enum(FileStatus), default=FileStatus.TEMPORARY, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)
    updated_at = Column(
        DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (Index("ix_managed_files_status_created", "status", "created_at"),)

    @property
    def is_permanent(self) -> bool:
        return self.status == FileStatus.PERMANENT

    def set_permanent(self) -> None:
        self.status = FileStatus.PERMANENT

    def __repr__(self):
        return f"<ManagedFile(id={self.id}, uri={self.uri}, status={self.status})>"
