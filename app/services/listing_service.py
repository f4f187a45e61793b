"""Listing service — loads one city partition and normalises its rows.

The three city tables have different shapes; to_listing() maps each of them
onto the unified Listing schema:

- Hyderabad: location / micro_market / project_name as stored.
- Goa: `type` is the property type, `location_area` is the location, there is
  no legacy slug and no share/resale flags.
- Dubai: the community is both the location and the project grouping.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cities import CityConfig
from app.core.exceptions import DataSourceError
from app.core.logging import get_logger
from app.database import DB_ERRORS
from app.schemas.listing_schema import Listing

logger = get_logger(__name__)


def _as_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return []


def _hyderabad_fields(row: Any) -> Dict[str, Any]:
    return {
        "slug": row.slug or row.seo_slug or str(row.id),
        "property_type": row.property_type or "Apartment",
        "bhk_config": row.bhk_config,
        "location": row.location or "",
        "micro_market": row.micro_market,
        "project_name": row.project_name,
        "possession_status": row.possession_status,
        "landowner_share": bool(row.landowner_share),
        "investor_share": bool(row.investor_share),
        "is_resale": bool(row.is_resale),
    }


def _goa_fields(row: Any) -> Dict[str, Any]:
    # Goa rows are addressed by seo_slug or id only.
    return {
        "slug": row.seo_slug or str(row.id),
        "property_type": row.type or "Holiday Home",
        "bhk_config": row.bhk_config,
        "location": row.location_area or "",
        "project_name": row.project_name,
        "possession_status": row.possession_status,
        "district": row.district,
        "listing_type": row.listing_type,
    }


def _dubai_fields(row: Any) -> Dict[str, Any]:
    return {
        "slug": row.slug or row.seo_slug or str(row.id),
        "property_type": row.property_type or "Apartment",
        "location": row.community or row.emirate or "",
        "project_name": row.community,
        "emirate": row.emirate,
    }


_CITY_FIELD_MAPPERS = {
    "hyderabad": _hyderabad_fields,
    "goa": _goa_fields,
    "dubai": _dubai_fields,
}


def to_listing(row: Any, city: CityConfig) -> Listing:
    """Normalise one ORM row of `city`'s table into a Listing."""
    data: Dict[str, Any] = {
        "id": row.id,
        "city": city.slug,
        "title": row.title or "",
        "seo_slug": row.seo_slug,
        "status": row.status,
        "description": row.description or "",
        "price": int(row.price or 0),
        "price_display": row.price_display,
        "price_currency": city.currency,
        "bedrooms": row.bedrooms,
        "bathrooms": row.bathrooms,
        "area_sqft": row.area_sqft,
        "amenities": _as_list(row.amenities),
        "main_image_url": row.main_image_url,
        "is_featured": bool(row.is_featured),
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    }
    data.update(_CITY_FIELD_MAPPERS[city.slug](row))
    return Listing(**data)


def published_filter(city: CityConfig):
    """WHERE clause selecting the city's published rows."""
    return city.model.status == city.published_status


async def fetch_city_listings(db: AsyncSession, city: CityConfig) -> List[Listing]:
    """Fetch every published listing of one city, featured first then newest.

    Raises:
        DataSourceError: if the query fails.
    """
    model = city.model
    stmt = (
        select(model)
        .where(published_filter(city))
        .order_by(model.is_featured.desc(), model.created_at.desc())
    )
    try:
        rows = (await db.execute(stmt)).scalars().all()
    except DB_ERRORS as e:
        logger.error(
            "Failed to fetch %s listings: %s", city.slug, str(e),
            extra={"city": city.slug},
        )
        raise DataSourceError(f"Could not load {city.name} listings", detail=str(e)) from e

    logger.debug("Loaded %d listings for %s", len(rows), city.slug, extra={"city": city.slug})
    return [to_listing(row, city) for row in rows]


async def get_listing_row(db: AsyncSession, city: CityConfig, listing_id: Any) -> Optional[Any]:
    """Fetch one row of `city`'s table by primary key, regardless of status."""
    try:
        return (await db.execute(select(city.model).where(city.model.id == listing_id))).scalar_one_or_none()
    except DB_ERRORS as e:
        raise DataSourceError(f"Could not load {city.name} listing {listing_id}", detail=str(e)) from e
