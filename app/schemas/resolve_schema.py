"""Result type returned by the slug resolver."""
from enum import Enum
from typing import Optional

from pydantic import BaseModel

from app.schemas.listing_schema import Listing


class ResolveStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    DATA_SOURCE_ERROR = "data_source_error"


class MatchStep(str, Enum):
    IDENTIFIER = "identifier"
    SLUG = "slug"
    FUZZY = "fuzzy"
    REDIRECT = "redirect"


class ResolveResult(BaseModel):
    """Found(listing, matched_by) | NotFound | DataSourceError(detail)."""
    status: ResolveStatus
    listing: Optional[Listing] = None
    matched_by: Optional[MatchStep] = None
    detail: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.status is ResolveStatus.FOUND

    @classmethod
    def ok(cls, listing: Listing, matched_by: MatchStep) -> "ResolveResult":
        return cls(status=ResolveStatus.FOUND, listing=listing, matched_by=matched_by)

    @classmethod
    def not_found(cls) -> "ResolveResult":
        return cls(status=ResolveStatus.NOT_FOUND)

    @classmethod
    def data_source_error(cls, detail: str) -> "ResolveResult":
        return cls(status=ResolveStatus.DATA_SOURCE_ERROR, detail=detail)
