"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 1 admin and 4 customers (password for all: ``password123``)
  - 8 vehicles across every vehicle type
  - 3 bookings (one active, one cancelled, one returned)
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import text

from vehicle_rental.domain.enums import (
    AvailabilityStatus,
    BookingStatus,
    Role,
    VehicleType,
)
from vehicle_rental.domain.pricing import calculate_total_price
from vehicle_rental.infrastructure.database import async_session_factory, engine
from vehicle_rental.infrastructure.models import (
    BookingModel,
    UserModel,
    VehicleModel,
)
from vehicle_rental.infrastructure.security import hash_password

DEFAULT_PASSWORD = "password123"

USERS = [
    {"name": "Fleet Admin", "email": "admin@rental.io", "phone": "01700000000", "role": Role.ADMIN},
    {"name": "Aarav Sharma", "email": "aarav@rental.io", "phone": "01711111111", "role": Role.CUSTOMER},
    {"name": "Priya Patel", "email": "priya@rental.io", "phone": "01722222222", "role": Role.CUSTOMER},
    {"name": "Rohan Mehta", "email": "rohan@rental.io", "phone": "01733333333", "role": Role.CUSTOMER},
    {"name": "Sneha Gupta", "email": "sneha@rental.io", "phone": "01744444444", "role": Role.CUSTOMER},
]

VEHICLES = [
    {"vehicle_name": "Toyota Corolla", "type": VehicleType.CAR, "registration_number": "DHA-1001", "daily_rent_price": Decimal("50.00")},
    {"vehicle_name": "Honda Civic", "type": VehicleType.CAR, "registration_number": "DHA-1002", "daily_rent_price": Decimal("55.00")},
    {"vehicle_name": "Yamaha R15", "type": VehicleType.BIKE, "registration_number": "DHA-2001", "daily_rent_price": Decimal("20.00")},
    {"vehicle_name": "Suzuki Gixxer", "type": VehicleType.BIKE, "registration_number": "DHA-2002", "daily_rent_price": Decimal("18.50")},
    {"vehicle_name": "Toyota Hiace", "type": VehicleType.VAN, "registration_number": "DHA-3001", "daily_rent_price": Decimal("90.00")},
    {"vehicle_name": "Nissan Urvan", "type": VehicleType.VAN, "registration_number": "DHA-3002", "daily_rent_price": Decimal("85.00")},
    {"vehicle_name": "Toyota Land Cruiser", "type": VehicleType.SUV, "registration_number": "DHA-4001", "daily_rent_price": Decimal("150.00")},
    {"vehicle_name": "Mitsubishi Pajero", "type": VehicleType.SUV, "registration_number": "DHA-4002", "daily_rent_price": Decimal("120.00")},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM users"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        password = hash_password(DEFAULT_PASSWORD)
        user_models = []
        for u in USERS:
            m = UserModel(password=password, **u)
            session.add(m)
            user_models.append(m)
        await session.flush()
        print(f"  Created {len(user_models)} users")

        # ── Vehicles ──────────────────────────────────────────────────
        vehicle_models = []
        for v in VEHICLES:
            m = VehicleModel(availability_status=AvailabilityStatus.AVAILABLE, **v)
            session.add(m)
            vehicle_models.append(m)
        await session.flush()
        print(f"  Created {len(vehicle_models)} vehicles")

        # ── Bookings ──────────────────────────────────────────────────
        today = date.today()
        bookings_data = [
            # Upcoming rental; keeps its vehicle booked
            (user_models[1], vehicle_models[0], today + timedelta(days=3), today + timedelta(days=6), BookingStatus.ACTIVE),
            (user_models[2], vehicle_models[2], today + timedelta(days=5), today + timedelta(days=7), BookingStatus.CANCELLED),
            (user_models[3], vehicle_models[4], today - timedelta(days=10), today - timedelta(days=4), BookingStatus.RETURNED),
        ]
        for customer, vehicle, start, end, status in bookings_data:
            session.add(
                BookingModel(
                    customer_id=customer.id,
                    vehicle_id=vehicle.id,
                    rent_start_date=start,
                    rent_end_date=end,
                    total_price=calculate_total_price(vehicle.daily_rent_price, start, end),
                    status=status,
                )
            )
            if status == BookingStatus.ACTIVE:
                vehicle.availability_status = AvailabilityStatus.BOOKED
        await session.flush()
        print(f"  Created {len(bookings_data)} bookings")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
