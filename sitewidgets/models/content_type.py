from sqlalchemy import JSON, Column, String

from sitewidgets.database import Base


class ContentType(Base):
    """A bundle of content (insights, executives, ...) and the fields it defines."""

    __tablename__ = "content_types"

    machine_name = Column(String, primary_key=True)
    label = Column(String, nullable=False)
    fields = Column(JSON, default=list, nullable=False)  # ["body", "field_summary", ...]

    def has_field(self, field_name: str) -> bool:
        return field_name in (self.fields or [])
