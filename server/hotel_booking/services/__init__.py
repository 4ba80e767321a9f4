"""Service layer package."""

from .booking_service import BookingService
from .eligibility_service import EligibilityService

__all__ = [
    "BookingService",
    "EligibilityService",
]
