"""SQLAlchemy models for the listings backend."""
from app.models.hyderabad_property_model import HyderabadProperty
from app.models.goa_property_model import GoaHolidayProperty
from app.models.dubai_property_model import DubaiProperty
from app.models.redirect_model import PropertySlugRedirect

__all__ = [
    "HyderabadProperty",
    "GoaHolidayProperty",
    "DubaiProperty",
    "PropertySlugRedirect",
]
