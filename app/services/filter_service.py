"""Filter service — narrows and orders an already-fetched list of listings.

Handles:
- Predicate filters: search, type, location, bedrooms, price, communities,
  micro markets, share/resale flags, possession status, amenities and the
  city-specific district / listing type / emirate
- Price buckets: "50L-1Cr" → [5_000_000, 10_000_000)
- Sorting: price asc/desc, newest, or featured-first-then-newest by default
- Grouping of landowner/investor share listings by project
- Query-string parsing: ?communities=A,B&landownerShare=true → FilterCriteria

Everything here is pure: no I/O, inputs are never mutated.
"""
from datetime import timezone
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from app.core.logging import get_logger
from app.schemas.filter_schema import FilterCriteria
from app.schemas.listing_schema import Listing

logger = get_logger(__name__)

INDEPENDENT = "Independent"

PRICE_BUCKETS: Dict[str, Tuple[int, Optional[int]]] = {
    "0-50L": (0, 5_000_000),
    "50L-1Cr": (5_000_000, 10_000_000),
    "1-2Cr": (10_000_000, 20_000_000),
    "2-5Cr": (20_000_000, 50_000_000),
    "5Cr+": (50_000_000, None),
}

Predicate = Callable[[Listing], bool]


def parse_price_range(price_range: Optional[str]) -> Tuple[int, Optional[int]]:
    """Bucket key → (inclusive lower, exclusive upper or None). Unknown → (0, None)."""
    return PRICE_BUCKETS.get(price_range or "", (0, None))


def _contains(haystack: Optional[str], needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def _matches_community(listing: Listing, communities: Sequence[str]) -> bool:
    """OR over the requested communities; "Independent" = no project name."""
    wanted_independent = INDEPENDENT in communities
    projects = {c.lower() for c in communities if c != INDEPENDENT}

    if not listing.project_name:
        return wanted_independent
    return listing.project_name.lower() in projects


def _has_amenities(listing: Listing, amenities: Sequence[str]) -> bool:
    owned = [a.lower() for a in listing.amenities]
    return all(any(a.lower() in own for own in owned) for a in amenities)


def build_predicates(criteria: FilterCriteria) -> List[Predicate]:
    """One predicate per criterion that is set; unset criteria add nothing."""
    predicates: List[Predicate] = []

    if criteria.search_query:
        q = criteria.search_query.lower()
        predicates.append(
            lambda l: _contains(l.title, q) or _contains(l.description, q) or _contains(l.location, q)
        )

    if criteria.property_type and criteria.property_type != "all":
        predicates.append(lambda l: l.property_type == criteria.property_type)

    if criteria.property_types:
        types = set(criteria.property_types)
        predicates.append(lambda l: l.property_type in types)

    if criteria.location:
        loc = criteria.location.lower()
        predicates.append(lambda l: _contains(l.location, loc) or _contains(l.micro_market, loc))

    if criteria.bedrooms is not None:
        predicates.append(lambda l: l.bedrooms == criteria.bedrooms)

    if criteria.price_range:
        low, high = parse_price_range(criteria.price_range)
        predicates.append(lambda l: l.price >= low and (high is None or l.price < high))
    elif criteria.price_min is not None or criteria.price_max is not None:
        low = criteria.price_min or 0
        high = criteria.price_max
        predicates.append(lambda l: l.price >= low and (high is None or l.price <= high))

    if criteria.communities:
        predicates.append(lambda l: _matches_community(l, criteria.communities))

    if criteria.micro_markets:
        markets = set(criteria.micro_markets)
        predicates.append(lambda l: l.micro_market in markets)

    if criteria.landowner_share:
        predicates.append(lambda l: l.landowner_share)
    if criteria.investor_share:
        predicates.append(lambda l: l.investor_share)
    if criteria.is_resale:
        predicates.append(lambda l: l.is_resale)

    if criteria.possession_status:
        status = criteria.possession_status.lower()
        predicates.append(lambda l: (l.possession_status or "").lower() == status)

    if criteria.amenities:
        predicates.append(lambda l: _has_amenities(l, criteria.amenities))

    if criteria.district:
        predicates.append(lambda l: l.district == criteria.district)
    if criteria.listing_type:
        predicates.append(lambda l: l.listing_type == criteria.listing_type)
    if criteria.emirate:
        predicates.append(lambda l: l.emirate == criteria.emirate)

    return predicates


def _timestamp(listing: Listing) -> float:
    """created_at as epoch seconds; naive values are read as UTC, missing sorts oldest."""
    created = listing.created_at
    if created is None:
        return float("-inf")
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def sort_listings(listings: Sequence[Listing], sort_by: Optional[str]) -> List[Listing]:
    """Stable sort. Unknown sort keys fall back to featured first, then newest."""
    if sort_by == "price_asc":
        return sorted(listings, key=lambda l: l.price)
    if sort_by == "price_desc":
        return sorted(listings, key=lambda l: l.price, reverse=True)
    if sort_by == "newest":
        return sorted(listings, key=_timestamp, reverse=True)
    return sorted(listings, key=lambda l: (l.is_featured, _timestamp(l)), reverse=True)


def apply_filters(listings: Sequence[Listing], criteria: FilterCriteria) -> List[Listing]:
    """Keep the listings matching every set criterion, then sort them."""
    predicates = build_predicates(criteria)
    filtered = [l for l in listings if all(p(l) for p in predicates)]
    logger.debug("Filtered %d → %d listings", len(listings), len(filtered))
    return sort_listings(filtered, criteria.sort_by)


def group_share_listings(listings: Sequence[Listing]) -> Dict[str, List[Listing]]:
    """Share listings keyed by project name ("Independent" when unset), keys sorted."""
    groups: Dict[str, List[Listing]] = {}
    for listing in listings:
        if not (listing.landowner_share or listing.investor_share):
            continue
        groups.setdefault(listing.project_name or INDEPENDENT, []).append(listing)
    return {name: groups[name] for name in sorted(groups)}


# ---------------------------------------------------------------------------
# Query-string → FilterCriteria
# ---------------------------------------------------------------------------

def _split(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _split_all(params: Mapping[str, str], key: str) -> List[str]:
    """Comma lists of every occurrence of a key: ?a=x,y&a=z → [x, y, z]."""
    getlist = getattr(params, "getlist", None)
    raw = getlist(key) if getlist else [params.get(key)]
    return [part for value in raw for part in _split(value)]


def _to_int(value: Optional[str]) -> Optional[int]:
    """Non-negative int or None; junk is ignored rather than rejected."""
    if value is None or value == "":
        return None
    try:
        number = int(value)
    except ValueError:
        logger.debug("Ignoring non-numeric filter value %r", value)
        return None
    return number if number >= 0 else None


def _flag(value: Optional[str]) -> Optional[bool]:
    return True if value == "true" else None


def criteria_from_query(params: Mapping[str, str]) -> FilterCriteria:
    """Map the public query-string names onto FilterCriteria.

    propertyType accepts a comma list (→ property_types) or a single value;
    communities/microMarkets accept comma lists, with community/microMarket
    as single-value aliases; repeated keys are merged. Share flags only count
    when equal to "true".
    """
    property_types = _split_all(params, "propertyType")
    bedrooms = _to_int(params.get("bedrooms"))

    return FilterCriteria(
        search_query=params.get("search") or None,
        property_type=property_types[0] if len(property_types) == 1 else None,
        property_types=property_types if len(property_types) > 1 else [],
        location=params.get("location") or None,
        bedrooms=bedrooms,
        price_range=params.get("priceRange") or None,
        price_min=_to_int(params.get("priceMin")),
        price_max=_to_int(params.get("priceMax")),
        communities=_split_all(params, "communities") or _split_all(params, "community"),
        micro_markets=_split_all(params, "microMarkets") or _split_all(params, "microMarket"),
        landowner_share=_flag(params.get("landownerShare")),
        investor_share=_flag(params.get("investorShare")),
        is_resale=_flag(params.get("isResale")),
        possession_status=params.get("possessionStatus") or None,
        amenities=_split_all(params, "amenities"),
        district=params.get("district") or None,
        listing_type=params.get("listingType") or None,
        emirate=params.get("emirate") or None,
        sort_by=params.get("sortBy") or None,
    )
