"""Read access to enrollments and tickets."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..models.enrollment import Enrollment, Ticket


class TicketRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_enrollment_by_user(self, user_id: int) -> Enrollment | None:
        stmt = select(Enrollment).where(Enrollment.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_ticket_by_enrollment(self, enrollment_id: int) -> Ticket | None:
        """Return the enrollment's ticket with its ticket type loaded."""
        stmt = (
            select(Ticket)
            .options(selectinload(Ticket.ticket_type))
            .where(Ticket.enrollment_id == enrollment_id)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()
