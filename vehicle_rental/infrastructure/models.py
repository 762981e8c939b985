"""
SQLAlchemy ORM models (maps to PostgreSQL).

Tables
------
* ``users``     -- admins and customers
* ``vehicles``  -- rentable fleet with an availability flag
* ``bookings``  -- one customer renting one vehicle for a date range

Indexes
-------
* **B-Tree** on ``bookings.customer_id``, ``bookings.vehicle_id`` and
  ``bookings.status`` for the joined list views and the delete guards.
* **Partial unique** index on ``bookings(vehicle_id) WHERE status = 'active'``
  so the database itself refuses a second active booking per vehicle.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    func,
    text,
)

from .database import Base
from vehicle_rental.domain.enums import (
    AvailabilityStatus,
    BookingStatus,
    Role,
    VehicleType,
)


def _values(enum_cls):
    return [member.value for member in enum_cls]


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(150), unique=True, nullable=False)
    phone = Column(String(20), nullable=True)
    role = Column(
        Enum(Role, name="userrole", values_callable=_values),
        default=Role.CUSTOMER,
        nullable=False,
    )
    password = Column(String(255), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class VehicleModel(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    vehicle_name = Column(String(100), nullable=False)
    type = Column(
        Enum(VehicleType, name="vehicletype", values_callable=_values),
        nullable=False,
    )
    registration_number = Column(String(50), unique=True, nullable=False)
    daily_rent_price = Column(Numeric(10, 2), nullable=False)
    availability_status = Column(
        Enum(AvailabilityStatus, name="availabilitystatus", values_callable=_values),
        default=AvailabilityStatus.AVAILABLE,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_vehicles_availability", "availability_status"),
        CheckConstraint("daily_rent_price > 0", name="ck_vehicles_price_positive"),
    )


class BookingModel(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    rent_start_date = Column(Date, nullable=False)
    rent_end_date = Column(Date, nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    status = Column(
        Enum(BookingStatus, name="bookingstatus", values_callable=_values),
        default=BookingStatus.ACTIVE,
        nullable=False,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_bookings_customer", "customer_id"),
        Index("idx_bookings_vehicle", "vehicle_id"),
        Index("idx_bookings_status", "status"),
        Index(
            "uq_bookings_vehicle_active",
            "vehicle_id",
            unique=True,
            postgresql_where=text("status = 'active'"),
            sqlite_where=text("status = 'active'"),
        ),
        CheckConstraint(
            "rent_end_date > rent_start_date", name="ck_bookings_date_range"
        ),
    )
