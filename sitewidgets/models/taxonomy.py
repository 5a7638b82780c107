from sqlalchemy import Column, Index, Integer, String

from sitewidgets.database import Base


class TaxonomyTerm(Base):
    __tablename__ = "taxonomy_terms"

    id = Column(Integer, primary_key=True, index=True)
    vocabulary = Column(String, nullable=False)
    name = Column(String, nullable=False)

    __table_args__ = (Index("ix_taxonomy_terms_vocabulary", "vocabulary"),)
