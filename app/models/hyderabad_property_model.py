"""HyderabadProperty SQLAlchemy model — resale, new launch and share flats."""
from typing import Optional

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.property_base import PropertyColumnsMixin


class HyderabadProperty(PropertyColumnsMixin, Base):
    __tablename__ = "hyderabad_properties"

    slug: Mapped[Optional[str]] = mapped_column(String(255), index=True, comment="Legacy slug")
    property_type: Mapped[Optional[str]] = mapped_column(String(50))
    bhk_config: Mapped[Optional[str]] = mapped_column(String(20))

    location: Mapped[Optional[str]] = mapped_column(String(255))
    micro_market: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    project_name: Mapped[Optional[str]] = mapped_column(String(255))
    possession_status: Mapped[Optional[str]] = mapped_column(String(50), comment="Ready to Move, Under Construction")

    landowner_share: Mapped[bool] = mapped_column(Boolean, default=False)
    investor_share: Mapped[bool] = mapped_column(Boolean, default=False)
    is_resale: Mapped[bool] = mapped_column(Boolean, default=False)

    __table_args__ = (
        Index("ix_hyderabad_properties_status_featured", "status", "is_featured", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<HyderabadProperty(id={self.id}, title='{self.title}', status={self.status})>"
