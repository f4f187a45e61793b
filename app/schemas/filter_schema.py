"""FilterCriteria — the immutable filter configuration for one listing query."""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FilterCriteria(BaseModel):
    """User-selected filters. None / empty means "do not filter on this"."""
    model_config = ConfigDict(frozen=True)

    search_query: Optional[str] = None
    property_type: Optional[str] = None
    property_types: List[str] = []
    location: Optional[str] = None
    bedrooms: Optional[int] = Field(None, ge=0)

    price_range: Optional[str] = Field(None, description="0-50L, 50L-1Cr, 1-2Cr, 2-5Cr, 5Cr+; unknown keys do not filter")
    price_min: Optional[int] = Field(None, ge=0)
    price_max: Optional[int] = Field(None, ge=0)

    communities: List[str] = []
    micro_markets: List[str] = []

    landowner_share: Optional[bool] = None
    investor_share: Optional[bool] = None
    is_resale: Optional[bool] = None

    possession_status: Optional[str] = None
    amenities: List[str] = []

    district: Optional[str] = None
    listing_type: Optional[str] = None
    emirate: Optional[str] = None

    sort_by: Optional[str] = Field(None, description="price_asc, price_desc, newest; anything else = featured first")
