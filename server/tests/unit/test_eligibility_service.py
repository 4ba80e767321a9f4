"""Unit tests for the eligibility service."""

import pytest

from hotel_booking.core.exceptions import CannotListHotelsError, NotFoundError
from hotel_booking.models import TicketStatus
from hotel_booking.services.eligibility_service import EligibilityService


@pytest.mark.asyncio
async def test_paid_in_person_ticket_with_hotel_is_eligible(test_session, factory):
    """A paid in person ticket that includes the hotel passes."""
    user = await factory.eligible_user()

    await EligibilityService(test_session).check_eligibility(user.id)


@pytest.mark.asyncio
async def test_user_without_enrollment(test_session, factory):
    user = await factory.user()

    with pytest.raises(NotFoundError) as exc_info:
        await EligibilityService(test_session).check_eligibility(user.id)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_enrollment_without_ticket(test_session, factory):
    user = await factory.user()
    await factory.enrollment(user)

    with pytest.raises(NotFoundError) as exc_info:
        await EligibilityService(test_session).check_eligibility(user.id)

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "status, is_remote, includes_hotel, reason",
    [
        (TicketStatus.RESERVED, False, True, "ticket is not paid"),
        (TicketStatus.PAID, True, True, "ticket is remote"),
        (TicketStatus.PAID, False, False, "ticket does not include hotel"),
    ],
)
async def test_ineligible_tickets(test_session, factory, status, is_remote, includes_hotel, reason):
    """Unpaid, remote, and hotel-less tickets are refused with 402."""
    user = await factory.user()
    enrollment = await factory.enrollment(user)
    ticket_type = await factory.ticket_type(is_remote=is_remote, includes_hotel=includes_hotel)
    await factory.ticket(enrollment, ticket_type, status=status)

    with pytest.raises(CannotListHotelsError) as exc_info:
        await EligibilityService(test_session).check_eligibility(user.id)

    assert exc_info.value.status_code == 402
    assert exc_info.value.problem_details["reason"] == reason


@pytest.mark.asyncio
async def test_unpaid_check_comes_before_ticket_type(test_session, factory):
    """An unpaid remote ticket is reported as unpaid."""
    user = await factory.user()
    enrollment = await factory.enrollment(user)
    ticket_type = await factory.ticket_type(is_remote=True, includes_hotel=False)
    await factory.ticket(enrollment, ticket_type, status=TicketStatus.RESERVED)

    with pytest.raises(CannotListHotelsError) as exc_info:
        await EligibilityService(test_session).check_eligibility(user.id)

    assert exc_info.value.problem_details["reason"] == "ticket is not paid"
