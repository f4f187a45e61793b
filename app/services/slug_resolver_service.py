"""Slug resolver — finds the listing behind a /{city}/buy/{slug} URL.

Resolution order (first hit wins):
1. Identifier: the slug is a UUID → lookup by id. Nothing else is tried.
2. Exact slug: seo_slug (Goa) or seo_slug OR slug (other cities).
3. Fuzzy title match, for cities with fuzzy_match enabled (Goa). Best-effort:
   old Goa URLs were generated from titles, so the slug words are searched
   for in titles and the closest candidate is picked.
4. Redirect table: (slug, city) → new_slug, then step 2 again with new_slug.

Every step only filters on the city's published status. A database failure
at any step is logged and reported as DATA_SOURCE_ERROR, never raised, so
callers can tell "no such listing" from "backend unavailable".
"""
import re
import time
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cities import CityConfig, get_city_config
from app.core.logging import get_logger
from app.database import DB_ERRORS
from app.models.redirect_model import PropertySlugRedirect
from app.schemas.listing_schema import Listing
from app.schemas.resolve_schema import MatchStep, ResolveResult
from app.services.listing_service import published_filter, to_listing

logger = get_logger(__name__)

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

FUZZY_RESULT_LIMIT = 20
FUZZY_MIN_PHRASE_LENGTH = 3
TITLE_PHRASE_TOKENS = 6
_TITLE_PHRASE_STOP_TOKENS = frozenset({"goa", "north", "south", "by"})


def is_identifier(listing_slug: str) -> bool:
    return bool(UUID_PATTERN.match(listing_slug))


@dataclass(frozen=True)
class FuzzyPhrases:
    """Search phrases derived from a slug like 'ocean-breeze-villas-calangute-goa'."""
    tokens: tuple
    project: str       # first <=3 tokens: "ocean breeze villas"
    location: str      # last 3 tokens: "breeze villas calangute"
    title: str         # title-cased meaningful tokens: "Ocean Breeze Villas Calangute"

    @property
    def slug_phrase(self) -> str:
        return " ".join(self.tokens)


def fuzzy_phrases(listing_slug: str, city_slug: str = "goa") -> FuzzyPhrases:
    tokens = [t for t in listing_slug.lower().split("-") if t]
    if tokens and tokens[-1] == city_slug:
        tokens = tokens[:-1]

    meaningful = [t for t in tokens if t not in _TITLE_PHRASE_STOP_TOKENS][:TITLE_PHRASE_TOKENS]
    return FuzzyPhrases(
        tokens=tuple(tokens),
        project=" ".join(tokens[:3]),
        location=" ".join(tokens[-3:]),
        title=" ".join(t.capitalize() for t in meaningful),
    )


def pick_best_match(candidates: Sequence[Any], phrases: FuzzyPhrases) -> Optional[Any]:
    """Pick the closest candidate by title; candidates arrive in a fixed order.

    (i) title contains the title-cased slug phrase,
    (ii) the first 3 words of the title appear in the slug phrase,
    (iii) title contains the project phrase (case-insensitive),
    (iv) otherwise the first candidate.
    """
    if not candidates:
        return None

    if phrases.title:
        for item in candidates:
            if phrases.title in (item.title or ""):
                return item

    slug_phrase = phrases.slug_phrase
    for item in candidates:
        head = " ".join((item.title or "").lower().split()[:3])
        if head and head in slug_phrase:
            return item

    project = phrases.project.lower()
    if project:
        for item in candidates:
            if project in (item.title or "").lower():
                return item

    return candidates[0]


def _like_pattern(phrase: str) -> str:
    escaped = phrase.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _deterministic(stmt, model):
    return stmt.order_by(model.created_at.desc(), model.id.asc())


async def _find_by_id(db: AsyncSession, city: CityConfig, listing_slug: str) -> Optional[Any]:
    model = city.model
    stmt = select(model).where(model.id == uuid.UUID(listing_slug), published_filter(city))
    return (await db.execute(stmt)).scalar_one_or_none()


async def _find_by_slug(db: AsyncSession, city: CityConfig, slug: str) -> Optional[Any]:
    model = city.model
    clauses = [getattr(model, field) == slug for field in city.slug_fields]
    stmt = select(model).where(or_(*clauses), published_filter(city))
    return (await db.execute(_deterministic(stmt, model).limit(1))).scalars().first()


async def _title_search(db: AsyncSession, city: CityConfig, phrase: str) -> List[Any]:
    model = city.model
    stmt = select(model).where(
        published_filter(city),
        model.title.ilike(_like_pattern(phrase), escape="\\"),
    )
    stmt = _deterministic(stmt, model).limit(FUZZY_RESULT_LIMIT)
    return list((await db.execute(stmt)).scalars().all())


async def _find_fuzzy(db: AsyncSession, city: CityConfig, listing_slug: str) -> Optional[Any]:
    phrases = fuzzy_phrases(listing_slug, city.slug)
    if len(phrases.project) < FUZZY_MIN_PHRASE_LENGTH:
        return None

    candidates = await _title_search(db, city, phrases.project)
    if not candidates and len(phrases.location) >= FUZZY_MIN_PHRASE_LENGTH:
        candidates = await _title_search(db, city, phrases.location)

    return pick_best_match(candidates, phrases)


async def _find_redirect_target(db: AsyncSession, city: CityConfig, listing_slug: str) -> Optional[str]:
    stmt = select(PropertySlugRedirect.new_slug).where(
        PropertySlugRedirect.old_slug == listing_slug,
        PropertySlugRedirect.location == city.slug,
    )
    return (await db.execute(stmt.limit(1))).scalars().first()


async def _resolve_in_city(db: AsyncSession, city: CityConfig, listing_slug: str) -> ResolveResult:
    if is_identifier(listing_slug):
        row = await _find_by_id(db, city, listing_slug)
        if row is None:
            return ResolveResult.not_found()
        return ResolveResult.ok(to_listing(row, city), MatchStep.IDENTIFIER)

    row = await _find_by_slug(db, city, listing_slug)
    if row is not None:
        return ResolveResult.ok(to_listing(row, city), MatchStep.SLUG)

    if city.fuzzy_match:
        row = await _find_fuzzy(db, city, listing_slug)
        if row is not None:
            return ResolveResult.ok(to_listing(row, city), MatchStep.FUZZY)

    new_slug = await _find_redirect_target(db, city, listing_slug)
    if new_slug:
        row = await _find_by_slug(db, city, new_slug)
        if row is not None:
            return ResolveResult.ok(to_listing(row, city), MatchStep.REDIRECT)

    return ResolveResult.not_found()


async def resolve_listing(db: AsyncSession, city_slug: str, listing_slug: str) -> ResolveResult:
    """Resolve (city_slug, listing_slug) to at most one published listing."""
    city = get_city_config(city_slug)
    if city is None or not listing_slug:
        return ResolveResult.not_found()

    log_extra = {"city": city.slug, "listing_slug": listing_slug}
    started = time.perf_counter()
    try:
        result = await _resolve_in_city(db, city, listing_slug)
    except DB_ERRORS as e:
        logger.error("Listing lookup failed: %s", str(e), extra=log_extra, exc_info=True)
        return ResolveResult.data_source_error(str(e))

    duration = round(time.perf_counter() - started, 4)
    if result.found:
        logger.info(
            "Resolved listing %s", result.listing.id,
            extra={**log_extra, "matched_by": result.matched_by.value, "duration": duration},
        )
    else:
        logger.info("Listing not found", extra={**log_extra, "duration": duration})
    return result


async def resolve_listing_or_none(db: AsyncSession, city_slug: str, listing_slug: str) -> Optional[Listing]:
    """Collapse the result to Listing | None (errors count as not found)."""
    result = await resolve_listing(db, city_slug, listing_slug)
    return result.listing if result.found else None


def canonical_slug(listing: Listing, requested_slug: str) -> str:
    """seo_slug, else legacy slug, else whatever was requested."""
    return listing.seo_slug or listing.slug or requested_slug
