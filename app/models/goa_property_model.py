"""GoaHolidayProperty SQLAlchemy model — holiday homes and villas.

The Goa table has no legacy `slug` column; only `seo_slug` identifies a row.
"""
from typing import Optional

from sqlalchemy import Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.models.property_base import PropertyColumnsMixin


class GoaHolidayProperty(PropertyColumnsMixin, Base):
    __tablename__ = "goa_holiday_properties"

    type: Mapped[Optional[str]] = mapped_column(String(50), comment="Villa, Apartment, Holiday Home")
    bhk_config: Mapped[Optional[str]] = mapped_column(String(20))

    district: Mapped[Optional[str]] = mapped_column(String(50), comment="North Goa, South Goa")
    location_area: Mapped[Optional[str]] = mapped_column(String(255))
    listing_type: Mapped[Optional[str]] = mapped_column(String(20), comment="Sale, Rent, Both")

    project_name: Mapped[Optional[str]] = mapped_column(String(255))
    developer_name: Mapped[Optional[str]] = mapped_column(String(255))
    possession_status: Mapped[Optional[str]] = mapped_column(String(50))

    seo_title: Mapped[Optional[str]] = mapped_column(String(500))
    meta_description: Mapped[Optional[str]] = mapped_column(Text)

    __table_args__ = (
        Index("ix_goa_holiday_properties_status_featured", "status", "is_featured", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<GoaHolidayProperty(id={self.id}, title='{self.title}', status={self.status})>"
