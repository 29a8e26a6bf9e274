"""Catalog model.

A catalog groups categories and products for a merchant store:

    Catalog
        - category 1
        - category 2
        - product 1
        - product 2

The catalog code is unique per merchant store (same code may be reused
by another store). A catalog always belongs to exactly one store.
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from merchant_admin.models.merchant_store import MerchantStore
from merchant_admin.stores.postgres import Base


class CatalogEntryType(str, Enum):
    """Kind of object grouped under a catalog."""

    CATEGORY = "category"
    PRODUCT = "product"


class Catalog(Base):
    """Catalog of categories and products owned by a merchant store."""

    __tablename__ = "catalogs"
    __table_args__ = (
        UniqueConstraint("merchant_id", "code", name="uq_catalogs_merchant_code"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    merchant_id: Mapped[int] = mapped_column(
        ForeignKey("merchant_stores.id"),
        index=True,
        nullable=False,
    )
    merchant_store: Mapped[MerchantStore] = relationship()

    code: Mapped[str] = mapped_column(String(100), nullable=False)
    visible: Mapped[bool] = mapped_column(default=False)
    default_catalog: Mapped[bool] = mapped_column(default=False)

    entries: Mapped[list["CatalogEntry"]] = relationship(
        back_populates="catalog",
        cascade="all, delete-orphan",
        order_by="CatalogEntry.id",
    )

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

    @validates("code")
    def _validate_code(self, key: str, value: str | None) -> str:
        if value is None or not value.strip():
            raise ValueError("Catalog code must not be empty")
        return value.strip()

    def __repr__(self) -> str:
        return f"<Catalog {self.code} merchant={self.merchant_id}>"


class CatalogEntry(Base):
    """Category or product reference grouped under a catalog."""

    __tablename__ = "catalog_entries"
    __table_args__ = (
        UniqueConstraint(
            "catalog_id",
            "entry_type",
            "reference_code",
            name="uq_catalog_entries_catalog_type_code",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    catalog_id: Mapped[int] = mapped_column(
        ForeignKey("catalogs.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    catalog: Mapped[Catalog] = relationship(back_populates="entries")

    entry_type: Mapped[str] = mapped_column(String(20))  # category / product
    reference_code: Mapped[str] = mapped_column(String(100))
    visible: Mapped[bool] = mapped_column(default=True)

    def __repr__(self) -> str:
        return f"<CatalogEntry {self.entry_type}:{self.reference_code}>"
