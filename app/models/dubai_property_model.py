"""DubaiProperty SQLAlchemy model — off-plan and ready units in the UAE."""
from typing import Optional

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.property_base import PropertyColumnsMixin


class DubaiProperty(PropertyColumnsMixin, Base):
    __tablename__ = "dubai_properties"

    slug: Mapped[Optional[str]] = mapped_column(String(255), index=True, comment="Legacy slug")
    property_type: Mapped[Optional[str]] = mapped_column(String(50))

    emirate: Mapped[Optional[str]] = mapped_column(String(50))
    community: Mapped[Optional[str]] = mapped_column(String(255))
    developer: Mapped[Optional[str]] = mapped_column(String(255))
    building_name: Mapped[Optional[str]] = mapped_column(String(255))

    __table_args__ = (
        Index("ix_dubai_properties_status_featured", "status", "is_featured", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<DubaiProperty(id={self.id}, title='{self.title}', status={self.status})>"
