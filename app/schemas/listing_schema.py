"""Pydantic schemas for listing API responses.

Listing is the city-agnostic shape: rows from the three city tables are
normalised into it by listing_service.to_listing().
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Listing(BaseModel):
    """Unified property listing."""
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    city: str
    title: str = ""
    slug: Optional[str] = None
    seo_slug: Optional[str] = None
    status: str
    description: str = ""

    price: int = 0
    price_display: Optional[str] = None
    price_currency: str = "INR"

    property_type: Optional[str] = None
    bhk_config: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    area_sqft: Optional[float] = None

    location: str = ""
    micro_market: Optional[str] = None
    project_name: Optional[str] = None
    possession_status: Optional[str] = None
    amenities: List[str] = []
    main_image_url: Optional[str] = None

    is_featured: bool = False
    landowner_share: bool = False
    investor_share: bool = False
    is_resale: bool = False

    # Goa
    district: Optional[str] = None
    listing_type: Optional[str] = None
    # Dubai
    emirate: Optional[str] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ListingPage(BaseModel):
    """Paginated listing results."""
    items: List[Listing]
    total: int
    page: int
    page_size: int
    pages: int


class ShareGroup(BaseModel):
    """Landowner/investor share listings of one project."""
    project_name: str
    listings: List[Listing]


class ResolvedListing(BaseModel):
    """Listing found by the slug resolver plus its canonical URL."""
    listing: Listing
    matched_by: str = Field(..., description="identifier, slug, fuzzy or redirect")
    canonical_slug: str
    canonical_url: str
    redirect_required: bool = Field(
        False,
        description="True when the requested slug is not the canonical one",
    )


class CityRead(BaseModel):
    slug: str
    name: str
    currency: str
    region: str
    country: str
    fuzzy_match: bool
