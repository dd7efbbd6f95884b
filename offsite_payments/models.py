from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Optional

from sqlalchemy import JSON, DateTime, Numeric, String, Text, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class OrderTransaction(Base):
    """Latest acknowledged outcome of an order at one integration."""

    __tablename__ = "order_transactions"
    __table_args__ = (UniqueConstraint("integration", "item_id", name="uq_integration_item"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    integration: Mapped[str] = mapped_column(String(64), nullable=False)
    item_id: Mapped[str] = mapped_column(String(128), nullable=False)
    transaction_id: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    currency: Mapped[Optional[str]] = mapped_column(String(3), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    status_code: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    test: Mapped[bool] = mapped_column(default=False, nullable=False)
    payload: Mapped[Dict[str, str]] = mapped_column(JSON, default=dict)
    received_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    acknowledged_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    notification_count: Mapped[int] = mapped_column(default=1, nullable=False)
