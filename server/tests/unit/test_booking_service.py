"""Unit tests for the booking service."""

import pytest

from hotel_booking.core.exceptions import (
    BookingOwnershipError,
    CannotListHotelsError,
    NotFoundError,
    RoomFullError,
)
from hotel_booking.repositories.booking_repository import BookingRepository
from hotel_booking.services.booking_service import BookingService


@pytest.mark.asyncio
async def test_get_booking_returns_room(test_session, factory):
    user = await factory.eligible_user()
    hotel = await factory.hotel()
    room = await factory.room(hotel)
    booking = await factory.booking(user, room)

    found = await BookingService(test_session).get_booking(user.id)

    assert found.id == booking.id
    assert found.room.id == room.id
    assert found.room.capacity == room.capacity


@pytest.mark.asyncio
async def test_get_booking_without_booking(test_session, factory):
    user = await factory.eligible_user()

    with pytest.raises(NotFoundError):
        await BookingService(test_session).get_booking(user.id)


@pytest.mark.asyncio
async def test_get_booking_checks_eligibility_first(test_session, factory):
    """An ineligible user is refused even when a booking exists."""
    user = await factory.user()
    enrollment = await factory.enrollment(user)
    await factory.ticket(enrollment, await factory.ticket_type(is_remote=True))
    await factory.booking(user, await factory.room(await factory.hotel()))

    with pytest.raises(CannotListHotelsError):
        await BookingService(test_session).get_booking(user.id)


@pytest.mark.asyncio
async def test_create_booking(test_session, factory):
    user = await factory.eligible_user()
    room = await factory.room(await factory.hotel(), capacity=2)

    booking = await BookingService(test_session).create_booking(user.id, room.id)

    assert booking.id is not None
    assert booking.user_id == user.id
    assert booking.room_id == room.id
    assert await BookingRepository(test_session).count_room_bookings(room.id) == 1


@pytest.mark.asyncio
async def test_create_booking_unknown_room(test_session, factory, missing_id):
    user = await factory.eligible_user()

    with pytest.raises(NotFoundError):
        await BookingService(test_session).create_booking(user.id, missing_id)


@pytest.mark.asyncio
async def test_create_booking_full_room(test_session, factory):
    room = await factory.room(await factory.hotel(), capacity=1)
    await factory.booking(await factory.user(), room)
    user = await factory.eligible_user()

    with pytest.raises(RoomFullError) as exc_info:
        await BookingService(test_session).create_booking(user.id, room.id)

    assert exc_info.value.status_code == 403
    assert await BookingRepository(test_session).count_room_bookings(room.id) == 1


@pytest.mark.asyncio
async def test_create_booking_ineligible_user_on_unknown_room(test_session, factory, missing_id):
    """Eligibility is decided before the room is looked up."""
    user = await factory.user()

    with pytest.raises(NotFoundError) as exc_info:
        await BookingService(test_session).create_booking(user.id, missing_id)

    assert exc_info.value.problem_details["resource_type"] == "enrollment"


@pytest.mark.asyncio
async def test_update_booking_moves_room(test_session, factory):
    user = await factory.eligible_user()
    hotel = await factory.hotel()
    first_room = await factory.room(hotel)
    second_room = await factory.room(hotel)
    booking = await factory.booking(user, first_room)
    booking_id = booking.id
    created_at, updated_at = booking.created_at, booking.updated_at

    updated = await BookingService(test_session).update_booking(user.id, booking_id, second_room.id)

    assert updated.id == booking_id
    assert updated.user_id == user.id
    assert updated.room_id == second_room.id
    # SQLite hands timestamps back without an offset
    assert updated.created_at.replace(tzinfo=None) == created_at.replace(tzinfo=None)
    assert updated.updated_at.replace(tzinfo=None) > updated_at.replace(tzinfo=None)


@pytest.mark.asyncio
async def test_update_booking_same_room_is_a_no_op(test_session, factory):
    """Staying put succeeds even if the room is full."""
    user = await factory.eligible_user()
    room = await factory.room(await factory.hotel(), capacity=1)
    booking = await factory.booking(user, room)

    updated = await BookingService(test_session).update_booking(user.id, booking.id, room.id)

    assert updated.id == booking.id
    assert updated.room_id == room.id
    assert not test_session.in_transaction()


@pytest.mark.asyncio
async def test_update_booking_of_another_user(test_session, factory):
    owner = await factory.user()
    hotel = await factory.hotel()
    booking = await factory.booking(owner, await factory.room(hotel))
    target_room = await factory.room(hotel)
    user = await factory.eligible_user()

    with pytest.raises(BookingOwnershipError) as exc_info:
        await BookingService(test_session).update_booking(user.id, booking.id, target_room.id)

    assert exc_info.value.status_code == 401


@pytest.mark.asyncio
async def test_update_booking_unknown_booking(test_session, factory, missing_id):
    user = await factory.eligible_user()
    room = await factory.room(await factory.hotel())

    with pytest.raises(NotFoundError) as exc_info:
        await BookingService(test_session).update_booking(user.id, missing_id, room.id)

    assert exc_info.value.problem_details["resource_type"] == "booking"


@pytest.mark.asyncio
async def test_update_booking_room_checked_before_booking(test_session, factory, missing_id):
    user = await factory.eligible_user()

    with pytest.raises(NotFoundError) as exc_info:
        await BookingService(test_session).update_booking(user.id, missing_id, missing_id)

    assert exc_info.value.problem_details["resource_type"] == "room"


@pytest.mark.asyncio
async def test_update_booking_without_room_id(test_session, factory):
    user = await factory.eligible_user()
    booking = await factory.booking(user, await factory.room(await factory.hotel()))

    with pytest.raises(NotFoundError) as exc_info:
        await BookingService(test_session).update_booking(user.id, booking.id, None)

    assert exc_info.value.problem_details["resource_type"] == "room"


@pytest.mark.asyncio
async def test_update_booking_into_full_room(test_session, factory):
    user = await factory.eligible_user()
    hotel = await factory.hotel()
    booking = await factory.booking(user, await factory.room(hotel))
    full_room = await factory.room(hotel, capacity=1)
    await factory.booking(await factory.user(), full_room)

    with pytest.raises(RoomFullError):
        await BookingService(test_session).update_booking(user.id, booking.id, full_room.id)

    assert booking.room_id != full_room.id
