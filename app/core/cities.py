"""City partitions — one configuration record per supported city.

Every city keeps its listings in its own table with its own vocabulary for the
"published" status and its own set of slug columns. Callers look the record up
with get_city_config() instead of branching on the city name.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Type

from app.models import DubaiProperty, GoaHolidayProperty, HyderabadProperty


@dataclass(frozen=True)
class CityConfig:
    slug: str
    name: str
    model: Type
    published_status: str
    slug_fields: Tuple[str, ...]
    fuzzy_match: bool
    currency: str
    region: str
    country: str


CITY_CONFIGS: Dict[str, CityConfig] = {
    "hyderabad": CityConfig(
        slug="hyderabad",
        name="Hyderabad",
        model=HyderabadProperty,
        published_status="active",
        slug_fields=("seo_slug", "slug"),
        fuzzy_match=False,
        currency="INR",
        region="Telangana",
        country="IN",
    ),
    "goa": CityConfig(
        slug="goa",
        name="Goa",
        model=GoaHolidayProperty,
        published_status="Active",
        slug_fields=("seo_slug",),
        fuzzy_match=True,
        currency="INR",
        region="Goa",
        country="IN",
    ),
    "dubai": CityConfig(
        slug="dubai",
        name="Dubai, UAE",
        model=DubaiProperty,
        published_status="published",
        slug_fields=("seo_slug", "slug"),
        fuzzy_match=False,
        currency="AED",
        region="Dubai",
        country="AE",
    ),
}


def get_city_config(city_slug: Optional[str]) -> Optional[CityConfig]:
    """Return the city record, or None for anything not in CITY_CONFIGS."""
    if not city_slug:
        return None
    return CITY_CONFIGS.get(city_slug)
