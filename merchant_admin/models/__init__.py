"""SQLAlchemy ORM models.

Models represent database tables:
- merchant_stores: Tenants
- users / groups / user_groups: Admin accounts and their authorization groups
- catalogs / catalog_entries: Per-store grouping of categories and products
"""

from merchant_admin.models.merchant_store import MerchantStore
from merchant_admin.models.user import Group, User, user_groups
from merchant_admin.models.catalog import Catalog, CatalogEntry, CatalogEntryType

__all__ = [
    "Catalog",
    "CatalogEntry",
    "CatalogEntryType",
    "Group",
    "MerchantStore",
    "User",
    "user_groups",
]
