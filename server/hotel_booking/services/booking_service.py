"""Booking service for business logic operations."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import BookingOwnershipError, NotFoundError, RoomFullError
from ..core.observability import metrics_collector
from ..models.booking import Booking
from ..models.hotel import Room
from ..repositories.booking_repository import BookingRepository
from .eligibility_service import EligibilityService

logger = logging.getLogger(__name__)


class BookingService:
    """
    Service for reading, creating and moving a user's hotel booking.

    Each operation checks eligibility first. Capacity checks run against a
    locked room row and commit together with the write they guard.
    """

    def __init__(
        self,
        db: AsyncSession,
        bookings: BookingRepository | None = None,
        eligibility: EligibilityService | None = None,
    ):
        self.db = db
        self.bookings = bookings or BookingRepository(db)
        self.eligibility = eligibility or EligibilityService(db)

    async def get_booking(self, user_id: int) -> Booking:
        """
        Get the user's booking together with its room.

        Raises:
            NotFoundError: If the user has no booking
            CannotListHotelsError: If the user's ticket is not eligible
        """
        await self.eligibility.check_eligibility(user_id)

        booking = await self.bookings.find_booking_by_user(user_id)
        if not booking:
            raise NotFoundError(resource_type="booking", detail="User has no booking")

        return booking

    async def create_booking(self, user_id: int, room_id: int) -> Booking:
        """
        Book a room for the user.

        Args:
            user_id: Authenticated user
            room_id: Room to book

        Returns:
            Created booking entity

        Raises:
            NotFoundError: If the room does not exist
            RoomFullError: If the room is at capacity
            CannotListHotelsError: If the user's ticket is not eligible
        """
        await self.eligibility.check_eligibility(user_id)

        room = await self._get_room_locked(room_id)
        booked = await self._ensure_room_has_space(room)

        booking = await self.bookings.create_booking(user_id, room.id)
        await self.db.commit()
        await self.db.refresh(booking)

        metrics_collector.record_booking_created(room.id)
        metrics_collector.set_room_occupancy(room.id, booked + 1, room.capacity)
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "room_id": room.id,
                "room_occupancy": f"{booked + 1}/{room.capacity}"
            }
        )

        return booking

    async def update_booking(self, user_id: int, booking_id: int, room_id: int | None) -> Booking:
        """
        Move the user's booking to another room.

        Args:
            user_id: Authenticated user
            booking_id: Booking to move
            room_id: Destination room; None is treated as an unknown room

        Returns:
            The updated booking; ``id`` and ``user_id`` are unchanged

        Raises:
            NotFoundError: If the room or the booking does not exist
            BookingOwnershipError: If the booking belongs to another user
            RoomFullError: If the destination room is at capacity
            CannotListHotelsError: If the user's ticket is not eligible
        """
        await self.eligibility.check_eligibility(user_id)

        room = await self._get_room_locked(room_id)

        booking = await self.bookings.find_booking_by_id(booking_id)
        if not booking:
            raise NotFoundError(resource_type="booking", resource_id=booking_id)

        if booking.user_id != user_id:
            metrics_collector.record_rejection("NOT_BOOKING_OWNER")
            logger.warning(
                "Booking update refused - not the owner",
                extra={"booking_id": booking_id, "user_id": user_id, "owner_id": booking.user_id}
            )
            raise BookingOwnershipError(booking_id)

        # Staying in the same room does not take another place
        if booking.room_id == room.id:
            # Ends the transaction so the room lock is released
            await self.db.commit()
            logger.info(
                "Booking already in requested room",
                extra={"booking_id": booking_id, "room_id": room.id}
            )
            return booking

        booked = await self._ensure_room_has_space(room)
        previous_room_id = booking.room_id

        await self.bookings.update_booking_room(booking, room.id)
        await self.db.commit()
        await self.db.refresh(booking)

        metrics_collector.record_booking_moved(room.id)
        metrics_collector.set_room_occupancy(room.id, booked + 1, room.capacity)
        logger.info(
            "Booking moved successfully",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "from_room_id": previous_room_id,
                "to_room_id": room.id
            }
        )

        return booking

    async def _get_room_locked(self, room_id: int | None) -> Room:
        room = None
        if room_id is not None:
            room = await self.bookings.find_room_by_id(room_id, for_update=True)
        if not room:
            raise NotFoundError(resource_type="room", resource_id=room_id)
        return room

    async def _ensure_room_has_space(self, room: Room) -> int:
        """Return the room's current booking count, or raise if it is full."""
        booked = await self.bookings.count_room_bookings(room.id)
        if booked >= room.capacity:
            metrics_collector.record_rejection("ROOM_FULL")
            logger.warning(
                "Booking refused - room full",
                extra={"room_id": room.id, "capacity": room.capacity, "booked": booked}
            )
            raise RoomFullError(room_id=room.id, capacity=room.capacity)
        return booked
