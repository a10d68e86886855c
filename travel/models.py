from sqlalchemy import Column, Integer, BigInteger, String, DateTime, Date, Text, ForeignKey, Numeric, CheckConstraint, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from travel.database import Base

# SQLite only autoincrements INTEGER primary keys
ID = BigInteger().with_variant(Integer, "sqlite")

# ================================
# Users & Roles
# ================================
class User(Base):
    __tablename__ = "users"

    id = Column(ID, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user_roles = relationship("UserHasRole", back_populates="user")
    bookings = relationship("Booking", back_populates="user")

class Role(Base):
    __tablename__ = "roles"

    id = Column(ID, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user_roles = relationship("UserHasRole", back_populates="role")

class UserHasRole(Base):
    __tablename__ = "user_has_roles"

    id = Column(ID, primary_key=True, index=True)
    user_id = Column(ID, ForeignKey("users.id"), nullable=False)
    role_id = Column(ID, ForeignKey("roles.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="user_roles")
    role = relationship("Role", back_populates="user_roles")

# ================================
# Locations
# ================================
class Location(Base):
    __tablename__ = "locations"

    id = Column(ID, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    city = Column(String(100), index=True)
    country = Column(String(100), index=True)
    description = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    tours = relationship("Tour", back_populates="location")
    lodges = relationship("Lodge", back_populates="location")
    departures = relationship("Transport", foreign_keys="Transport.from_location_id", back_populates="from_location")
    arrivals = relationship("Transport", foreign_keys="Transport.to_location_id", back_populates="to_location")

# ================================
# Bookable Resources
# ================================
# Every resource keeps capacity/available counters and a version column.
# Bookings refer to resources by (resource_type, resource_id) without a foreign
# key, so resource ids are never reused (AUTOINCREMENT on SQLite).
# Counters are only changed through the inventory ledger or admin updates.

class Tour(Base):
    __tablename__ = "tours"
    __table_args__ = (
        CheckConstraint("available >= 0 AND available <= capacity", name="ck_tours_available"),
        {"sqlite_autoincrement": True},
    )

    id = Column(ID, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text)
    location_id = Column(ID, ForeignKey("locations.id"), index=True)
    price = Column(Numeric(10, 2), nullable=False)
    duration_days = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    guide = Column(String(255))
    capacity = Column(Integer, nullable=False)
    available = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    location = relationship("Location", back_populates="tours")

    __mapper_args__ = {"version_id_col": version}

class Lodge(Base):
    __tablename__ = "lodges"
    __table_args__ = (
        CheckConstraint("available >= 0 AND available <= capacity", name="ck_lodges_available"),
        {"sqlite_autoincrement": True},
    )

    id = Column(ID, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    type = Column(String(50), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    contact_number = Column(String(50))
    location_id = Column(ID, ForeignKey("locations.id"), index=True)
    price_per_night = Column(Numeric(10, 2), nullable=False)
    amenities = Column(Text)
    rating = Column(Numeric(3, 2))
    capacity = Column(Integer, nullable=False)  # total rooms
    available = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    location = relationship("Location", back_populates="lodges")

    __mapper_args__ = {"version_id_col": version}

class Transport(Base):
    __tablename__ = "transports"
    __table_args__ = (
        CheckConstraint("available >= 0 AND available <= capacity", name="ck_transports_available"),
        {"sqlite_autoincrement": True},
    )

    id = Column(ID, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False, index=True)
    provider = Column(String(255))
    vehicle_number = Column(String(50))
    from_location_id = Column(ID, ForeignKey("locations.id"), index=True)
    to_location_id = Column(ID, ForeignKey("locations.id"), index=True)
    price_per_ticket = Column(Numeric(10, 2), nullable=False)
    description = Column(Text)
    capacity = Column(Integer, nullable=False)
    available = Column(Integer, nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    from_location = relationship("Location", foreign_keys=[from_location_id], back_populates="departures")
    to_location = relationship("Location", foreign_keys=[to_location_id], back_populates="arrivals")

    __mapper_args__ = {"version_id_col": version}

# ================================
# Bookings & Payments
# ================================
class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_resource", "resource_type", "resource_id"),
        CheckConstraint("quantity > 0", name="ck_bookings_quantity"),
    )

    id = Column(ID, primary_key=True, index=True)
    user_id = Column(ID, ForeignKey("users.id"), nullable=False, index=True)
    resource_type = Column(String(20), nullable=False)
    resource_id = Column(ID, nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, index=True)
    booking_date = Column(DateTime(timezone=True), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    special_requests = Column(Text)
    version = Column(Integer, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="bookings")
    payments = relationship("Payment", back_populates="booking", cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version}

class Payment(Base):
    __tablename__ = "payments"

    id = Column(ID, primary_key=True, index=True)
    booking_id = Column(ID, ForeignKey("bookings.id"), nullable=False, index=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, index=True)
    method = Column(String(50), nullable=False, index=True)
    transaction_id = Column(String(64), unique=True, nullable=False, index=True)
    payment_date = Column(DateTime(timezone=True), nullable=False)
    failure_reason = Column(Text)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    booking = relationship("Booking", back_populates="payments")

    __mapper_args__ = {"version_id_col": version}
