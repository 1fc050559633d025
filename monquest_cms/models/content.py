"""Landing page content model — one document per section type."""

import enum

from sqlalchemy import Column, String, DateTime, Enum, JSON, func

from monquest_cms.db.base import Base
from monquest_cms.models.role import new_id


class ContentType(str, enum.Enum):
    HERO = "HERO"
    FEATURES = "FEATURES"
    HOW_IT_WORKS = "HOW_IT_WORKS"
    ROADMAP = "ROADMAP"
    FAQ = "FAQ"

    @classmethod
    def from_slug(cls, slug: str) -> "ContentType":
        """``how-it-works`` -> ``HOW_IT_WORKS``. Raises ValueError when unknown."""
        return cls(slug.upper().replace("-", "_"))

    @property
    def slug(self) -> str:
        return self.value.lower().replace("_", "-")


class Content(Base):
    """Structured payload for one landing page section."""
    __tablename__ = "contents"

    id = Column(String(40), primary_key=True, default=new_id)
    type = Column(Enum(ContentType), unique=True, nullable=False, index=True)
    data = Column(JSON, nullable=False)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now(), nullable=False)
