"""Group based authorization rules.

Admin users hold one or more groups. Rules:
- SUPERADMIN is not bound to a store and may assign any group
- ADMIN manages its own store and may assign any group except SUPERADMIN
- Other admin groups may only assign groups they hold themselves

Pure functions only; database access lives in the facades.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class AdminGroup(str, Enum):
    """Well-known authorization groups."""

    SUPERADMIN = "SUPERADMIN"
    ADMIN = "ADMIN"
    ADMIN_RETAIL = "ADMIN_RETAIL"
    ADMIN_STORE = "ADMIN_STORE"
    ADMIN_CATALOGUE = "ADMIN_CATALOGUE"
    ADMIN_ORDER = "ADMIN_ORDER"
    ADMIN_CONTENT = "ADMIN_CONTENT"


# Groups allowed to manage other admin users
USER_MANAGER_GROUPS = (AdminGroup.SUPERADMIN, AdminGroup.ADMIN, AdminGroup.ADMIN_RETAIL)

# Groups allowed on user create / list / delete
ADMIN_GROUPS = (AdminGroup.SUPERADMIN, AdminGroup.ADMIN)

# Groups allowed to manage catalogs
CATALOG_GROUPS = (AdminGroup.SUPERADMIN, AdminGroup.ADMIN, AdminGroup.ADMIN_CATALOGUE)


@dataclass(frozen=True)
class Principal:
    """Authenticated admin user for the current request."""

    user_id: int
    user_name: str
    store_code: str
    groups: frozenset[str] = field(default_factory=frozenset)

    def is_user_in_role(self, group: "str | AdminGroup") -> bool:
        return bool(_names([group]) & self.groups)

    @property
    def is_superadmin(self) -> bool:
        return self.is_user_in_role(AdminGroup.SUPERADMIN.value)


def _names(groups: Iterable[str | AdminGroup]) -> set[str]:
    return {g.value if isinstance(g, AdminGroup) else str(g) for g in groups}


def holds_any(held: Iterable[str], required: Iterable[str | AdminGroup]) -> bool:
    """True if at least one of the required groups is held."""
    return bool(_names(held) & _names(required))


def uncovered_groups(held: Iterable[str], requested: Iterable[str]) -> list[str]:
    """Return the requested groups the holder is not allowed to assign.

    Args:
        held: Groups of the acting user.
        requested: Groups to be assigned to the target user.

    Returns:
        Sorted list of group names outside the holder's reach (empty if all covered).
    """
    held_names = _names(held)
    requested_names = _names(requested)

    if AdminGroup.SUPERADMIN.value in held_names:
        return []
    if AdminGroup.ADMIN.value in held_names:
        return sorted(name for name in requested_names if name == AdminGroup.SUPERADMIN.value)
    return sorted(requested_names - held_names)
