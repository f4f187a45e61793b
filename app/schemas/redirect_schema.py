"""Pydantic schemas for the slug redirect admin API."""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RedirectCreate(BaseModel):
    old_slug: str = Field(..., min_length=1, max_length=255)
    new_slug: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., description="City slug: hyderabad, goa, dubai")


class RedirectRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    old_slug: str
    new_slug: str
    location: str
    created_at: datetime


class SeoSlugRegenerated(BaseModel):
    """Outcome of regenerating one listing's SEO slug."""
    listing_id: UUID
    city: str
    old_slug: Optional[str] = None
    new_slug: str
    redirect_created: bool = False
