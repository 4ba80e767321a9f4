"""Persistence gateway over the booking and eligibility tables."""

from .booking_repository import BookingRepository
from .ticket_repository import TicketRepository

__all__ = ["BookingRepository", "TicketRepository"]
