"""SEO slug generation and regeneration.

Slug formats:
- Hyderabad / Dubai: {bhk}-{type}-{project or title}-{micro market or location}
  e.g. "3bhk-apartment-skyline-towers-kokapet"
- Goa: {location}-{project}-{type}-{bhk}-goa, e.g. "morjim-veora-villa-4bhk-goa"

Regenerating a slug writes it to seo_slug and records old → new in
property_slug_redirects so indexed URLs keep resolving.
"""
import re
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cities import CityConfig
from app.core.exceptions import DataSourceError, NotFoundError
from app.core.logging import get_logger
from app.database import DB_ERRORS
from app.models.redirect_model import PropertySlugRedirect
from app.schemas.listing_schema import Listing
from app.schemas.redirect_schema import SeoSlugRegenerated
from app.services.listing_service import get_listing_row, to_listing

logger = get_logger(__name__)

DEFAULT_MAX_LENGTH = 60
SLUG_TARGET_LENGTH = 50

_VALID_SLUG = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")
_TRAILING_HEX = (
    re.compile(r"-[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE),
    re.compile(r"-[0-9a-f]{12}$", re.IGNORECASE),
    re.compile(r"-[0-9a-f]{8}$", re.IGNORECASE),
)


def slugify(text: Optional[str]) -> str:
    """'Skyline Towers, Phase 2' → 'skyline-towers-phase-2'."""
    if not text:
        return ""
    slug = text.lower().strip()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    return 3 <= len(slug) <= 80 and bool(_VALID_SLUG.match(slug))


def _bhk_part(listing: Listing) -> str:
    if listing.bhk_config:
        return slugify(listing.bhk_config)
    if listing.bedrooms:
        return f"{listing.bedrooms}bhk"
    return ""


def _truncate(slug: str, max_length: int) -> str:
    target = min(max_length, SLUG_TARGET_LENGTH)
    if len(slug) <= target:
        return slug
    slug = slug[:target]
    last_hyphen = slug.rfind("-")
    if last_hyphen > target * 0.7:
        slug = slug[:last_hyphen]
    return slug.strip("-")


def generate_property_slug(listing: Listing, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Build the SEO slug for a Hyderabad or Dubai listing."""
    parts = [
        _bhk_part(listing),
        slugify(listing.property_type),
        slugify(listing.project_name or listing.title),
        slugify(listing.micro_market or listing.location),
    ]
    slug = "-".join(p for p in parts if p)
    slug = re.sub(r"-+", "-", slug).strip("-")

    for pattern in _TRAILING_HEX:
        slug = pattern.sub("", slug)

    # "3bhk-apartment-3bhk-..." and "3bhk-3bhk-..." collapse to one bhk token
    slug = re.sub(r"^(\d+bhk)-(apartment|villa|house|flat)-\1-", r"\1-\2-", slug, flags=re.IGNORECASE)
    slug = re.sub(r"^(\d+bhk)-(\d+bhk)-", r"\1-", slug, flags=re.IGNORECASE)

    slug = re.sub(r"-(hyderabad|goa|dubai)$", "", slug, flags=re.IGNORECASE)
    slug = slug.replace("-in-", "-")
    slug = re.sub(r"-+", "-", slug).strip("-")

    return _truncate(slug, max_length) or "property"


def generate_goa_property_slug(listing: Listing, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Build the SEO slug for a Goa listing; always ends in "-goa"."""
    parts = [
        slugify(listing.location),
        slugify(listing.project_name),
        slugify(listing.property_type),
        _bhk_part(listing),
        "goa",
    ]
    slug = re.sub(r"-+", "-", "-".join(p for p in parts if p)).strip("-")
    if slug == "goa":
        return "property-goa"
    return slug[:max_length].strip("-")


def ensure_unique_slug(base_slug: str, existing: Iterable[str]) -> str:
    """Append -1, -2, ... until the slug is not in `existing`."""
    taken = set(existing)
    slug = base_slug
    counter = 1
    while slug in taken:
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def build_seo_slug(listing: Listing) -> str:
    if listing.city == "goa":
        return generate_goa_property_slug(listing)
    return generate_property_slug(listing)


async def _taken_slugs(db: AsyncSession, city: CityConfig, exclude_id: UUID) -> set:
    model = city.model
    taken: set = set()
    for field in city.slug_fields:
        column = getattr(model, field)
        rows = await db.execute(select(column).where(model.id != exclude_id, column.isnot(None)))
        taken.update(rows.scalars().all())
    return taken


async def _record_redirect(db: AsyncSession, city: CityConfig, old_slug: str, new_slug: str) -> None:
    existing = (await db.execute(
        select(PropertySlugRedirect).where(
            PropertySlugRedirect.old_slug == old_slug,
            PropertySlugRedirect.location == city.slug,
        )
    )).scalar_one_or_none()
    if existing:
        existing.new_slug = new_slug
    else:
        db.add(PropertySlugRedirect(old_slug=old_slug, new_slug=new_slug, location=city.slug))

    # Older redirects pointing at old_slug now point straight at new_slug.
    await db.execute(
        update(PropertySlugRedirect)
        .where(
            PropertySlugRedirect.new_slug == old_slug,
            PropertySlugRedirect.location == city.slug,
        )
        .values(new_slug=new_slug)
    )
    # new_slug is live again, so a redirect away from it would shadow the listing.
    await db.execute(
        delete(PropertySlugRedirect).where(
            PropertySlugRedirect.old_slug == new_slug,
            PropertySlugRedirect.location == city.slug,
        )
    )


async def regenerate_seo_slug(db: AsyncSession, city: CityConfig, listing_id: UUID) -> SeoSlugRegenerated:
    """Recompute one listing's seo_slug, keeping the old URL alive via a redirect.

    Raises:
        NotFoundError: no row with that id in the city's table.
        DataSourceError: if the database rejects the update.
    """
    row = await get_listing_row(db, city, listing_id)
    if row is None:
        raise NotFoundError(f"{city.name} listing {listing_id} not found")

    old_slug = row.seo_slug
    try:
        new_slug = ensure_unique_slug(
            build_seo_slug(to_listing(row, city)),
            await _taken_slugs(db, city, row.id),
        )
        redirect_created = bool(old_slug) and old_slug != new_slug
        row.seo_slug = new_slug
        if redirect_created:
            await _record_redirect(db, city, old_slug, new_slug)
        await db.flush()
    except DB_ERRORS as e:
        logger.error("SEO slug update failed for %s: %s", listing_id, str(e), extra={"city": city.slug})
        raise DataSourceError(f"Could not update slug of listing {listing_id}", detail=str(e)) from e

    logger.info(
        "SEO slug regenerated: %s -> %s", old_slug, new_slug,
        extra={"city": city.slug, "listing_slug": new_slug},
    )
    return SeoSlugRegenerated(
        listing_id=row.id,
        city=city.slug,
        old_slug=old_slug,
        new_slug=new_slug,
        redirect_created=redirect_created,
    )
