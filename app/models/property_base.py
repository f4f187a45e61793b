"""Columns shared by every city property table.

Each city keeps its own table (hyderabad_properties, goa_holiday_properties,
dubai_properties); ids are only unique within one table.
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import BigInteger, Boolean, DateTime, Float, Integer, JSON, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column


class PropertyColumnsMixin:
    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(500))
    seo_slug: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    price: Mapped[Optional[int]] = mapped_column(BigInteger, comment="Smallest currency unit")
    price_display: Mapped[Optional[str]] = mapped_column(String(100))

    bedrooms: Mapped[Optional[int]] = mapped_column(Integer)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer)
    area_sqft: Mapped[Optional[float]] = mapped_column(Float)

    amenities: Mapped[Optional[List[str]]] = mapped_column(JSON, default=list)
    main_image_url: Mapped[Optional[str]] = mapped_column(String(2048))

    is_featured: Mapped[bool] = mapped_column(Boolean, default=False)
    status: Mapped[str] = mapped_column(String(20), index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
