"""Booking router: read, create and move the caller's hotel booking."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import CurrentUserId, DatabaseSession
from ..core.exceptions import NotFoundError, ValidationError
from ..schemas.booking import Booking, BookingRoomRequest, BookingWithRoom
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/booking", tags=["booking"])


def _to_response(schema, booking_model) -> JSONResponse:
    payload = schema.model_validate(booking_model).model_dump(mode="json", by_alias=True)
    return JSONResponse(status_code=200, content=payload)


def _require_room_id(request: BookingRoomRequest | None) -> int:
    if request is None or request.room_id is None:
        raise NotFoundError(resource_type="room", detail="roomId is required")
    return request.room_id


def _parse_booking_id(raw: str) -> int:
    """Accept only positive integers; anything else is rejected before domain logic runs."""
    # int() alone would also take signs, whitespace and underscores
    if not (raw.isascii() and raw.isdigit()) or int(raw) < 1:
        raise ValidationError(
            detail="bookingId must be a positive integer",
            errors={"bookingId": raw}
        )
    return int(raw)


@router.get("", response_model=BookingWithRoom)
async def get_booking(
    user_id: int = CurrentUserId,
    db: AsyncSession = DatabaseSession
) -> JSONResponse:
    """Get the caller's booking together with its room."""
    booking = await BookingService(db).get_booking(user_id)
    return _to_response(BookingWithRoom, booking)


@router.post("", response_model=Booking)
async def create_booking(
    request: BookingRoomRequest | None = None,
    user_id: int = CurrentUserId,
    db: AsyncSession = DatabaseSession
) -> JSONResponse:
    """
    Book a room.

    A missing ``roomId`` is answered like an unknown room (404).
    """
    room_id = _require_room_id(request)
    booking = await BookingService(db).create_booking(user_id, room_id)
    return _to_response(Booking, booking)


@router.put("/{booking_id}", response_model=Booking)
async def update_booking(
    booking_id: str,
    request: BookingRoomRequest | None = None,
    user_id: int = CurrentUserId,
    db: AsyncSession = DatabaseSession
) -> JSONResponse:
    """
    Move one of the caller's bookings to another room.

    Unlike creation, eligibility is checked before a missing ``roomId`` is
    reported as an unknown room.
    """
    parsed_booking_id = _parse_booking_id(booking_id)
    room_id = request.room_id if request else None
    booking = await BookingService(db).update_booking(user_id, parsed_booking_id, room_id)
    return _to_response(Booking, booking)
