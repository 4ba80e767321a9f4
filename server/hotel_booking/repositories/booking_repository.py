"""CRUD access to bookings and rooms."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.booking import Booking
from ..models.hotel import Room


class BookingRepository:
    """
    Queries behind the booking service.

    Writes only flush; committing is left to the caller so that a capacity
    check and the write that depends on it share one transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_booking_by_user(self, user_id: int) -> Booking | None:
        """Return the user's first booking, with its room loaded."""
        stmt = (
            select(Booking)
            .options(selectinload(Booking.room))
            .where(Booking.user_id == user_id)
            .order_by(Booking.id)
            .limit(1)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_booking_by_id(self, booking_id: int) -> Booking | None:
        stmt = select(Booking).where(Booking.id == booking_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_room_by_id(self, room_id: int, for_update: bool = False) -> Room | None:
        """
        Look up a room.

        With ``for_update`` the row is locked until the transaction ends,
        which serializes concurrent capacity checks on PostgreSQL. SQLite
        ignores the clause and serializes writers on its own.
        """
        stmt = select(Room).where(Room.id == room_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def count_room_bookings(self, room_id: int) -> int:
        stmt = select(func.count(Booking.id)).where(Booking.room_id == room_id)
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def create_booking(self, user_id: int, room_id: int) -> Booking:
        booking = Booking(user_id=user_id, room_id=room_id)
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def update_booking_room(self, booking: Booking, room_id: int) -> Booking:
        booking.room_id = room_id
        self.db.add(booking)
        await self.db.flush()
        return booking
