"""Booking-related Pydantic schemas.

Fields are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that reads and writes camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class BookingRoomRequest(CamelModel):
    """Request body for creating or moving a booking."""

    # Optional so that a missing roomId is reported as an unknown room
    room_id: Optional[int] = Field(None, description="Room to book")


class Room(CamelModel):
    """Room response schema."""

    id: int = Field(..., description="Room ID")
    name: str = Field(..., description="Room name")
    capacity: int = Field(..., ge=1, description="Number of people the room sleeps")
    hotel_id: int = Field(..., description="Hotel the room belongs to")
    created_at: datetime
    updated_at: datetime


class Booking(CamelModel):
    """Booking response schema."""

    id: int = Field(..., description="Booking ID")
    user_id: int = Field(..., description="Owner of the booking")
    room_id: int = Field(..., description="Booked room")
    created_at: datetime = Field(..., description="Creation time (ISO 8601)")
    updated_at: datetime = Field(..., description="Last change time (ISO 8601)")


class BookingWithRoom(Booking):
    """Booking response including the booked room."""

    room: Room
