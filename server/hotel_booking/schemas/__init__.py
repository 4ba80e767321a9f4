"""Pydantic schemas for request/response validation."""

from .booking import Booking, BookingRoomRequest, BookingWithRoom, Room

__all__ = ["Booking", "BookingRoomRequest", "BookingWithRoom", "Room"]
