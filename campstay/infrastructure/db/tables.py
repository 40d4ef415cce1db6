from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
)

metadata = MetaData()

# Read-only view of the external resource catalog.
resources = Table(
    "resources",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("owner_id", Integer, nullable=False),
    Column("nightly_price", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False, default="eur"),
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("resource_id", Integer, nullable=False),
    Column("renter_id", Integer, nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("status", String(16), nullable=False),
    Column("total_price", Numeric(12, 2), nullable=False),
    Column("payment_intent_ref", String(64)),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("cancellation_date", DateTime(timezone=True)),
    Index("ix_bookings_resource_dates", "resource_id", "start_date", "end_date"),
    Index("ix_bookings_payment_intent_ref", "payment_intent_ref"),
    Index("ix_bookings_status_end_date", "status", "end_date"),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("external_intent_id", String(64), nullable=False, unique=True),
    Column("booking_id", Integer),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency", String(3), nullable=False),
    Column("status", String(16), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
    Index("ix_payments_booking_id", "booking_id"),
)

unavailability_windows = Table(
    "unavailability_windows",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("resource_id", Integer, nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("reason", String(255)),
    Index("ix_unavailability_resource_dates", "resource_id", "start_date", "end_date"),
)
