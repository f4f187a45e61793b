"""Admin API — slug redirects and SEO slug regeneration.
/api/v1/admin"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_city, get_db
from app.api.responses import ok
from app.core.cities import CityConfig, get_city_config
from app.core.exceptions import DuplicateError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.models.redirect_model import PropertySlugRedirect
from app.schemas.base_schema import ApiResponse
from app.schemas.redirect_schema import RedirectCreate, RedirectRead, SeoSlugRegenerated
from app.services.slug_service import is_valid_slug, regenerate_seo_slug

logger = get_logger(__name__)

router = APIRouter()


@router.get("/redirects", response_model=ApiResponse[List[RedirectRead]])
async def list_redirects(
    request: Request,
    db: AsyncSession = Depends(get_db),
    location: Optional[str] = Query(None, description="Only redirects of this city"),
):
    """List slug redirects, newest first."""
    query = select(PropertySlugRedirect).order_by(PropertySlugRedirect.created_at.desc())
    if location:
        query = query.where(PropertySlugRedirect.location == location)
    redirects = (await db.execute(query)).scalars().all()
    return ok([RedirectRead.model_validate(r) for r in redirects], "Redirects listed successfully", request)


@router.post("/redirects", response_model=ApiResponse[RedirectRead], status_code=201)
async def create_redirect(payload: RedirectCreate, request: Request, db: AsyncSession = Depends(get_db)):
    """Map an obsolete slug of one city to its replacement."""
    if get_city_config(payload.location) is None:
        raise ValidationError(f"Unknown city '{payload.location}'")
    if payload.old_slug == payload.new_slug:
        raise ValidationError("old_slug and new_slug must differ")
    if not is_valid_slug(payload.new_slug):
        raise ValidationError(f"'{payload.new_slug}' is not a valid slug")

    existing = (await db.execute(
        select(PropertySlugRedirect).where(
            PropertySlugRedirect.old_slug == payload.old_slug,
            PropertySlugRedirect.location == payload.location,
        )
    )).scalar_one_or_none()
    if existing:
        raise DuplicateError(f"Redirect for '{payload.old_slug}' in {payload.location} already exists")

    redirect = PropertySlugRedirect(**payload.model_dump())
    db.add(redirect)
    await db.flush()
    logger.info(
        "Redirect created: %s -> %s", payload.old_slug, payload.new_slug,
        extra={"city": payload.location, "listing_slug": payload.old_slug},
    )
    return ok(RedirectRead.model_validate(redirect), "Redirect created successfully", request)


@router.delete("/redirects/{redirect_id}", response_model=ApiResponse[None])
async def delete_redirect(redirect_id: UUID, request: Request, db: AsyncSession = Depends(get_db)):
    """Delete a redirect."""
    redirect = (await db.execute(
        select(PropertySlugRedirect).where(PropertySlugRedirect.id == redirect_id)
    )).scalar_one_or_none()
    if not redirect:
        raise NotFoundError(f"Redirect {redirect_id} not found")
    await db.delete(redirect)
    return ok(None, "Redirect deleted successfully", request)


@router.post("/{city_slug}/listings/{listing_id}/seo-slug", response_model=ApiResponse[SeoSlugRegenerated])
async def regenerate_listing_slug(
    listing_id: UUID,
    request: Request,
    city: CityConfig = Depends(get_city),
    db: AsyncSession = Depends(get_db),
):
    """Recompute a listing's SEO slug; the previous slug keeps working via a redirect."""
    result = await regenerate_seo_slug(db, city, listing_id)
    return ok(result, "SEO slug regenerated successfully", request)
