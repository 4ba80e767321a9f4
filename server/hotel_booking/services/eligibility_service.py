"""Decides whether a user's ticket allows hotel bookings."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import CannotListHotelsError, NotFoundError
from ..core.observability import metrics_collector
from ..models.enrollment import TicketStatus
from ..repositories.ticket_repository import TicketRepository

logger = logging.getLogger(__name__)


class EligibilityService:
    """Service that checks enrollment and ticket state before any booking action."""

    def __init__(self, db: AsyncSession, tickets: TicketRepository | None = None):
        self.tickets = tickets or TicketRepository(db)

    async def check_eligibility(self, user_id: int) -> None:
        """
        Make sure the user may book a hotel room.

        Args:
            user_id: Authenticated user

        Raises:
            NotFoundError: If the user has no enrollment, or the enrollment has no ticket
            CannotListHotelsError: If the ticket is unpaid, remote, or excludes the hotel
        """
        enrollment = await self.tickets.find_enrollment_by_user(user_id)
        if not enrollment:
            logger.info("Booking refused - no enrollment", extra={"user_id": user_id})
            raise NotFoundError(resource_type="enrollment", detail="User has no enrollment")

        ticket = await self.tickets.find_ticket_by_enrollment(enrollment.id)
        if not ticket:
            logger.info(
                "Booking refused - no ticket",
                extra={"user_id": user_id, "enrollment_id": enrollment.id}
            )
            raise NotFoundError(resource_type="ticket", detail="Enrollment has no ticket")

        reason = None
        if ticket.status == TicketStatus.RESERVED:
            reason = "ticket is not paid"
        elif ticket.ticket_type.is_remote:
            reason = "ticket is remote"
        elif not ticket.ticket_type.includes_hotel:
            reason = "ticket does not include hotel"

        if reason:
            metrics_collector.record_rejection("CANNOT_LIST_HOTELS")
            logger.info(
                "Booking refused - ticket not eligible",
                extra={"user_id": user_id, "ticket_id": ticket.id, "reason": reason}
            )
            raise CannotListHotelsError(reason)
