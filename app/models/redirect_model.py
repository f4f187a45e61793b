"""PropertySlugRedirect SQLAlchemy model — obsolete slug → current slug."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class PropertySlugRedirect(Base):
    __tablename__ = "property_slug_redirects"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    old_slug: Mapped[str] = mapped_column(String(255), index=True)
    new_slug: Mapped[str] = mapped_column(String(255))
    location: Mapped[str] = mapped_column(String(20), comment="City slug: hyderabad, goa, dubai")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("old_slug", "location", name="uq_property_slug_redirects_old_slug_location"),
    )

    def __repr__(self) -> str:
        return f"<PropertySlugRedirect({self.location}: '{self.old_slug}' -> '{self.new_slug}')>"
