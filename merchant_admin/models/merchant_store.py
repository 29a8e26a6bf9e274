"""Merchant store model.

A merchant store is the tenant boundary: admin users and catalogs
always belong to exactly one store.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from merchant_admin.stores.postgres import Base


class MerchantStore(Base):
    """Merchant store (tenant)."""

    __tablename__ = "merchant_stores"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Stable store code (e.g., "DEFAULT")
    code: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(200))
    default_language: Mapped[str] = mapped_column(String(5), default="en")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<MerchantStore {self.code}>"
