import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


class Detailer(Base):
    __tablename__ = "detailers"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, index=True, default=generate_public_id)
    api_token_hash = Column(String(64), unique=True, index=True, nullable=True)  # sha256 of dashboard bearer token
    is_active = Column(Boolean, default=True, nullable=False)

    # Profile fields scored by the onboarding rubric
    business_name = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    services = Column(JSON, default=list, nullable=True)  # e.g. [{"name": "Full Detail", "price": 199}]
    business_hours = Column(JSON, default=list, nullable=True)  # One entry per weekday
    images = Column(JSON, default=list, nullable=True)  # Portfolio image keys/URLs
    address = Column(String(500), nullable=True)
    city = Column(String(255), nullable=True)
    state = Column(String(50), nullable=True)
    zip_code = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)  # E.164
    instagram = Column(String(255), nullable=True)
    tiktok = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)

    # SMS
    twilio_phone_number = Column(String(20), unique=True, index=True, nullable=True)  # E.164
    sms_enabled = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    customers = relationship(
        "CustomerSnapshot", back_populates="detailer", cascade="all, delete-orphan"
    )
    bookings = relationship("Booking", back_populates="detailer", cascade="all, delete-orphan")
    sms_messages = relationship(
        "SmsMessage", back_populates="detailer", cascade="all, delete-orphan"
    )


class CustomerSnapshot(Base):
    __tablename__ = "customer_snapshots"
    __table_args__ = (
        UniqueConstraint("detailer_id", "customer_phone", name="uq_customer_detailer_phone"),
    )

    id = Column(Integer, primary_key=True, index=True)
    detailer_id = Column(Integer, ForeignKey("detailers.id"), nullable=False, index=True)
    customer_phone = Column(String(32), nullable=False, index=True)  # E.164 when normalizable
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    location_type = Column(String(50), nullable=True)  # home, work, other
    customer_type = Column(String(20), nullable=True)  # new, returning (as last recorded)
    vehicle = Column(String(255), nullable=True)
    vehicle_year = Column(Integer, nullable=True)
    vehicle_make = Column(String(100), nullable=True)
    vehicle_model = Column(String(100), nullable=True)
    services = Column(JSON, default=list, nullable=True)
    data = Column(JSON, nullable=True)  # Free-form extras (imported history, notes)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    detailer = relationship("Detailer", back_populates="customers")


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    detailer_id = Column(Integer, ForeignKey("detailers.id"), nullable=False, index=True)
    customer_phone = Column(String(32), nullable=False, index=True)
    service_name = Column(String(255), nullable=True)
    scheduled_at = Column(DateTime, nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, confirmed, completed, cancelled
    completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    detailer = relationship("Detailer", back_populates="bookings")


class SmsMessage(Base):
    __tablename__ = "sms_messages"

    id = Column(Integer, primary_key=True, index=True)
    detailer_id = Column(Integer, ForeignKey("detailers.id"), nullable=False, index=True)
    customer_phone = Column(String(32), nullable=False, index=True)
    direction = Column(String(10), nullable=False)  # inbound, outbound
    body = Column(Text, nullable=True)
    message_sid = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime, server_default=func.now())

    detailer = relationship("Detailer", back_populates="sms_messages")
