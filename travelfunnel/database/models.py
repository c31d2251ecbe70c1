"""
SQLAlchemy model for the funnel lead record.
Used by postgres_real when DATABASE_URL is set.

Leads are created by the storefront when the buyer fills in the form; this
service only writes the terminal status of a checkout onto the row.
"""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class LeadRecord(Base):
    __tablename__ = "funnel_leads"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    status: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, index=True)
    last_error_message: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    insurance_voucher: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    insurance_order_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    ticket_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    payment_confirmation_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    recovery_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)


# Columns the checkout is allowed to write.
UPDATABLE_COLUMNS = frozenset({
    "status",
    "last_error_message",
    "insurance_voucher",
    "insurance_order_id",
    "ticket_link",
    "payment_confirmation_id",
    "recovery_notes",
})
