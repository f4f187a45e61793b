"""Old Google-indexed URLs, answered with a 301 to /{city}/buy/{canonical}.

- /properties/{city}/{slug}
- /{city}/{slug}   (pre-"buy" property pages)

Registered after every other router: the bare two-segment pattern must not
shadow real routes.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_city, get_db
from app.api.v1.listings import raise_for_unresolved
from app.core.cities import CityConfig
from app.services.slug_resolver_service import canonical_slug, resolve_listing

router = APIRouter()


async def _redirect_to_canonical(db: AsyncSession, city: CityConfig, listing_slug: str) -> RedirectResponse:
    result = await resolve_listing(db, city.slug, listing_slug)
    raise_for_unresolved(result, city, listing_slug)
    return RedirectResponse(
        url=f"/{city.slug}/buy/{canonical_slug(result.listing, listing_slug)}",
        status_code=301,
    )


@router.get("/properties/{city_slug}/{listing_slug}", include_in_schema=False)
async def legacy_property_redirect(
    listing_slug: str,
    city: CityConfig = Depends(get_city),
    db: AsyncSession = Depends(get_db),
):
    return await _redirect_to_canonical(db, city, listing_slug)


@router.get("/{city_slug}/{listing_slug}", include_in_schema=False)
async def legacy_city_property_redirect(
    listing_slug: str,
    city: CityConfig = Depends(get_city),
    db: AsyncSession = Depends(get_db),
):
    return await _redirect_to_canonical(db, city, listing_slug)
