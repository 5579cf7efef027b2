from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Vendor(Base):
    __tablename__ = "vendors"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    owner_name: Mapped[str] = mapped_column(String, nullable=False)
    product_types: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    pincode: Mapped[str] = mapped_column(String, nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)

    service_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lat: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lng: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Product(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    vendor_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    category: Mapped[str] = mapped_column(String, nullable=False)
    product_type: Mapped[str] = mapped_column(String, nullable=False)

    # Minutes.
    delivery_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Whole currency units (UGX has no minor unit).
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)

    first_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    address: Mapped[str] = mapped_column(String, nullable=False, default="")
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lng: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    # [{"product_id": str, "unit": int}], at most one line per product.
    cart: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    # Order ids, append-only.
    orders: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __mapper_args__ = {"version_id_col": version}


class Transaction(Base):
    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    customer_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    vendor_id: Mapped[str] = mapped_column(String, nullable=False, default="")
    order_id: Mapped[str] = mapped_column(String, nullable=False, default="")

    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    offer_used: Mapped[str] = mapped_column(String, nullable=False, default="NA")
    status: Mapped[str] = mapped_column(String, nullable=False)
    checkout_stage: Mapped[str] = mapped_column(String, nullable=False)
    payment_mode: Mapped[str] = mapped_column(String, nullable=False)
    payment_response: Mapped[str] = mapped_column(String, nullable=False, default="")

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    __mapper_args__ = {"version_id_col": version}


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    order_code: Mapped[str] = mapped_column(String, nullable=False)
    customer_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    vendor_id: Mapped[str | None] = mapped_column(String, nullable=True, index=True)

    # [{"product": {...snapshot...}, "unit": int}]
    items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    total_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paid_amount: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    payment_mode: Mapped[str] = mapped_column(String, nullable=False, default="")

    status: Mapped[str] = mapped_column(String, nullable=False)
    remarks: Mapped[str] = mapped_column(String, nullable=False, default="")
    delivery_agent_id: Mapped[str | None] = mapped_column(String, nullable=True)
    delivery_time: Mapped[int] = mapped_column(Integer, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    __mapper_args__ = {"version_id_col": version}


class DeliveryAgent(Base):
    __tablename__ = "delivery_agents"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)

    first_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    address: Mapped[str] = mapped_column(String, nullable=False, default="")
    pincode: Mapped[str] = mapped_column(String, nullable=False, index=True)

    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    lat: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    lng: Mapped[float] = mapped_column(Float, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class Offer(Base):
    __tablename__ = "offers"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    offer_type: Mapped[str] = mapped_column(String, nullable=False)
    vendor_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    min_value: Mapped[int] = mapped_column(Integer, nullable=False)
    offer_amount: Mapped[int] = mapped_column(Integer, nullable=False)

    # Stored and returned, never consulted when deciding whether an offer applies.
    start_validity: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    end_validity: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    promo_code: Mapped[str] = mapped_column(String, nullable=False)
    promo_type: Mapped[str] = mapped_column(String, nullable=False)
    banks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    bins: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    pincode: Mapped[str] = mapped_column(String, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class EventLog(Base):
    __tablename__ = "event_log"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    actor_id: Mapped[str | None] = mapped_column(String, nullable=True)

    entity_type: Mapped[str] = mapped_column(String, nullable=False)
    entity_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String, nullable=False)
    event_payload_json: Mapped[dict] = mapped_column(JSON, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
