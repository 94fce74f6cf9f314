"""Modelos SQLModel: resultado das cobranças PIX (o pedido em si não é persistido)."""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Timestamp com timezone (UTC)."""
    return datetime.now(timezone.utc)


class PixCharge(SQLModel, table=True):
    """Cobrança criada no gateway e o último status terminal conhecido."""

    __tablename__ = "pix_charge"

    id: Optional[int] = Field(default=None, primary_key=True)
    transaction_id: str = Field(unique=True, index=True, max_length=256)
    identifier: Optional[str] = Field(default=None, max_length=64)
    amount_cents: Optional[int] = Field(default=None)
    status: str = Field(default="pending", max_length=32)  # pending, paid, failed
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    paid_at: Optional[datetime] = Field(default=None)
