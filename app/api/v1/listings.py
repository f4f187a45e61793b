"""Public listings API — city listing pages, share groups, slug resolution.
/api/v1/cities, /api/v1/{city_slug}/listings, /api/v1/{city_slug}/buy/{listing_slug}"""
import math
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_city, get_db
from app.api.responses import ok
from app.config import settings
from app.core.cities import CITY_CONFIGS, CityConfig
from app.core.exceptions import DataSourceError, NotFoundError
from app.schemas.base_schema import ApiResponse, Meta
from app.schemas.listing_schema import CityRead, ListingPage, ResolvedListing, ShareGroup
from app.schemas.resolve_schema import ResolveResult, ResolveStatus
from app.services.filter_service import apply_filters, criteria_from_query, group_share_listings
from app.services.listing_service import fetch_city_listings
from app.services.slug_resolver_service import canonical_slug, resolve_listing

router = APIRouter()


def raise_for_unresolved(result: ResolveResult, city: CityConfig, listing_slug: str) -> None:
    """404 for not found, 503 for a failed lookup; no-op when found."""
    if result.status is ResolveStatus.DATA_SOURCE_ERROR:
        raise DataSourceError("Listing lookup is temporarily unavailable", detail=result.detail)
    if not result.found:
        raise NotFoundError(f"Listing '{listing_slug}' not found in {city.name}")


@router.get("/cities", response_model=ApiResponse[List[CityRead]])
async def list_cities(request: Request):
    """Cities with a listings partition."""
    cities = [
        CityRead(
            slug=c.slug,
            name=c.name,
            currency=c.currency,
            region=c.region,
            country=c.country,
            fuzzy_match=c.fuzzy_match,
        )
        for c in CITY_CONFIGS.values()
    ]
    return ok(cities, "Cities listed successfully", request)


@router.get("/{city_slug}/listings", response_model=ApiResponse[ListingPage])
async def list_city_listings(
    request: Request,
    city: CityConfig = Depends(get_city),
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=settings.max_page_size),
):
    """Published listings of one city, filtered and sorted.

    Filters come straight from the query string: search, propertyType,
    location, bedrooms, priceRange, priceMin, priceMax, communities,
    microMarkets, landownerShare, investorShare, isResale, possessionStatus,
    amenities, district, listingType, emirate, sortBy.
    """
    criteria = criteria_from_query(request.query_params)
    listings = apply_filters(await fetch_city_listings(db, city), criteria)

    size = page_size or settings.default_page_size
    total = len(listings)
    pages = math.ceil(total / size) if total > 0 else 0
    items = listings[(page - 1) * size: page * size]

    return ok(
        ListingPage(items=items, total=total, page=page, page_size=size, pages=pages),
        "Listings listed successfully",
        request,
        meta=Meta(page=page, page_size=size, total=total, pages=pages),
    )


@router.get("/{city_slug}/listings/shares", response_model=ApiResponse[List[ShareGroup]])
async def list_share_groups(
    request: Request,
    city: CityConfig = Depends(get_city),
    db: AsyncSession = Depends(get_db),
):
    """Landowner / investor share listings grouped by project, projects A→Z.

    Accepts the same filters as the listings endpoint.
    """
    criteria = criteria_from_query(request.query_params)
    listings = apply_filters(await fetch_city_listings(db, city), criteria)
    groups = [
        ShareGroup(project_name=name, listings=members)
        for name, members in group_share_listings(listings).items()
    ]
    return ok(groups, "Share listings grouped successfully", request)


@router.get("/{city_slug}/buy/{listing_slug}", response_model=ApiResponse[ResolvedListing])
async def get_listing_by_slug(
    listing_slug: str,
    request: Request,
    city: CityConfig = Depends(get_city),
    db: AsyncSession = Depends(get_db),
):
    """Resolve a listing URL segment (id, SEO slug, legacy slug or redirected slug).

    redirect_required tells the frontend to 301 to canonical_url.
    """
    result = await resolve_listing(db, city.slug, listing_slug)
    raise_for_unresolved(result, city, listing_slug)

    slug = canonical_slug(result.listing, listing_slug)
    return ok(
        ResolvedListing(
            listing=result.listing,
            matched_by=result.matched_by.value,
            canonical_slug=slug,
            canonical_url=f"{settings.site_base_url}/{city.slug}/buy/{slug}",
            redirect_required=slug != listing_slug,
        ),
        "Listing retrieved successfully",
        request,
    )
