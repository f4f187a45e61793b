"""API dependencies — database session, city lookup, admin authentication.

Admin endpoints require the X-API-Key header; the key is configured through
the API_KEY environment variable. Public listing endpoints are open.
"""
import secrets
from typing import AsyncGenerator, Annotated

from fastapi import Depends, HTTPException, Path, Security, status
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.cities import CityConfig, get_city_config
from app.core.exceptions import InvalidCityError
from app.database import async_session_factory


# ---------------------------------------------------------------------------
# Database session
# ---------------------------------------------------------------------------

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for request scope."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ---------------------------------------------------------------------------
# City path parameter
# ---------------------------------------------------------------------------

async def get_city(city_slug: Annotated[str, Path(description="hyderabad, goa or dubai")]) -> CityConfig:
    """Resolve the {city_slug} path segment; unknown cities are a 404 before any query."""
    city = get_city_config(city_slug)
    if city is None:
        raise InvalidCityError(f"Unknown city '{city_slug}'")
    return city


# ---------------------------------------------------------------------------
# API Key authentication
# ---------------------------------------------------------------------------

_api_key_header = APIKeyHeader(
    name="X-API-Key",
    auto_error=False,  # False so we return our own 401 instead of 403
    description="Admin API key, configured via API_KEY",
)


async def verify_api_key(
    api_key: Annotated[str | None, Security(_api_key_header)],
) -> str:
    """Validate the X-API-Key header with a constant-time comparison.

    Raises:
        HTTPException 401: key missing or wrong.
        HTTPException 500: API_KEY not configured on the server.
    """
    if not settings.api_key:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server misconfigured (API_KEY missing).",
        )

    if not api_key or not secrets.compare_digest(api_key, settings.api_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key. Use the X-API-Key header.",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return api_key


RequireApiKey = Depends(verify_api_key)
