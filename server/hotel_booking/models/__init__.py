"""Models module exporting all database models."""

from .booking import Booking
from .enrollment import Enrollment, Ticket, TicketStatus, TicketType
from .hotel import Hotel, Room
from .user import Session, User

__all__ = [
    # Accounts
    "User",
    "Session",

    # Eligibility
    "Enrollment",
    "Ticket",
    "TicketStatus",
    "TicketType",

    # Lodging
    "Hotel",
    "Room",
    "Booking",
]
