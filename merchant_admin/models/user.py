"""Admin user and group models.

Admin users sign in to the administration API. Each user belongs to one
merchant store and holds one or more authorization groups
(SUPERADMIN, ADMIN, ADMIN_CATALOGUE, ...).
"""

from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from merchant_admin.models.merchant_store import MerchantStore
from merchant_admin.stores.postgres import Base

user_groups = Table(
    "user_groups",
    Base.metadata,
    Column("user_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("group_id", ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
)


class Group(Base):
    """Authorization group."""

    __tablename__ = "groups"

    id: Mapped[int] = mapped_column(primary_key=True)
    group_name: Mapped[str] = mapped_column(String(100), unique=True, index=True)

    def __repr__(self) -> str:
        return f"<Group {self.group_name}>"


class User(Base):
    """Administrative user account."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Credentials
    admin_name: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    admin_email: Mapped[str] = mapped_column(String(255), index=True)
    admin_password: Mapped[str] = mapped_column(String(255))  # salt$hash, never serialized

    # Profile
    first_name: Mapped[str | None] = mapped_column(String(100))
    last_name: Mapped[str | None] = mapped_column(String(100))
    default_language: Mapped[str] = mapped_column(String(5), default="en")
    active: Mapped[bool] = mapped_column(default=True)

    # Tenant
    merchant_id: Mapped[int] = mapped_column(
        ForeignKey("merchant_stores.id"),
        index=True,
        nullable=False,
    )
    merchant_store: Mapped[MerchantStore] = relationship(lazy="selectin")

    groups: Mapped[list[Group]] = relationship(
        secondary=user_groups,
        lazy="selectin",
        order_by=Group.group_name,
    )

    # Session tracking
    last_access: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    login_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

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

    @property
    def group_names(self) -> list[str]:
        return sorted(group.group_name for group in self.groups)

    def __repr__(self) -> str:
        return f"<User {self.admin_name}>"
