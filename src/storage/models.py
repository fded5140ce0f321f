"""
SQLAlchemy table definitions for claims and claim events.
"""

import uuid
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    pass


class ClaimRecord(Base):
    """Insurance claim row."""

    __tablename__ = "claims"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    claim_number: Mapped[str] = mapped_column(String(20), unique=True, nullable=False)
    lob: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    policy_number: Mapped[str] = mapped_column(String(50), nullable=False)
    insured_name: Mapped[str] = mapped_column(String(120), nullable=False)
    loss_date: Mapped[date] = mapped_column(Date, nullable=False)
    loss_type: Mapped[str] = mapped_column(String(60), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    contact_email: Mapped[str] = mapped_column(String(320), nullable=False)
    priority: Mapped[str] = mapped_column(String(10), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(120), nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    events: Mapped[List["ClaimEventRecord"]] = relationship(
        back_populates="claim",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ClaimEventRecord.created_at",
    )

    def __repr__(self) -> str:
        return f"<ClaimRecord {self.claim_number} ({self.status})>"


class ClaimEventRecord(Base):
    """Audit-trail row owned by a claim."""

    __tablename__ = "claim_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    claim_id: Mapped[str] = mapped_column(
        ForeignKey("claims.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    claim: Mapped[ClaimRecord] = relationship(back_populates="events")
