#!/usr/bin/env python3
"""Setup script for the hotel booking API."""

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select

from hotel_booking.core.database import async_session_factory, close_db
from hotel_booking.core.dependencies import create_session_token
from hotel_booking.models import (
    Enrollment,
    Hotel,
    Room,
    Session,
    Ticket,
    TicketStatus,
    TicketType,
    User,
)

server_dir = Path(__file__).parent.parent / "server"

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup_database():
    """Bring the schema up to the latest migration."""
    logger.info("Setting up database...")

    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data():
    """Create a hotel with rooms and one user holding a paid hotel ticket."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing_hotels = await db.execute(select(func.count()).select_from(Hotel))
            if existing_hotels.scalar_one() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            hotel = Hotel(name="Driven Resort", image="https://example.com/driven-resort.png")
            hotel.rooms = [
                Room(name="101", capacity=1),
                Room(name="102", capacity=2),
                Room(name="201", capacity=3),
            ]
            db.add(hotel)

            with_hotel = TicketType(name="In person + hotel", price=60000, is_remote=False, includes_hotel=True)
            db.add_all([
                TicketType(name="Online", price=10000, is_remote=True, includes_hotel=False),
                TicketType(name="In person", price=25000, is_remote=False, includes_hotel=False),
                with_hotel,
            ])

            user = User(email="guest@example.com", password="not-a-real-hash")
            db.add(user)
            await db.flush()

            enrollment = Enrollment(user_id=user.id, name="Sample Guest", cpf="12345678909", phone="+5511999999999")
            db.add(enrollment)
            await db.flush()

            db.add(Ticket(ticket_type_id=with_hotel.id, enrollment_id=enrollment.id, status=TicketStatus.PAID))

            token = create_session_token(user.id)
            db.add(Session(user_id=user.id, token=token))

            await db.commit()
            logger.info("Sample data created successfully!")
            logger.info(f"Bearer token for {user.email}: {token}")

        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise


async def main():
    """Main setup function."""
    logger.info("Starting hotel booking API setup...")

    await asyncio.to_thread(setup_database)
    await create_sample_data()
    await close_db()

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn hotel_booking.main:app --reload")


if __name__ == "__main__":
    asyncio.run(main())
