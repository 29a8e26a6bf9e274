"""List criteria built from request query parameters.

Readable field names used by API clients are mapped to backend column
names, e.g. ``emailAddress`` -> ``admin_email``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

# Readable field name -> backend field name
USER_MAPPING_FIELDS = {
    "emailAddress": "admin_email",
    "userName": "admin_name",
}


@dataclass
class Criteria:
    """Filtering and scoping for list queries.

    store_code=None means "all stores" (superadmin listing).
    """

    store_code: str | None = None
    filters: dict[str, str] = field(default_factory=dict)


def build_criteria(params: Mapping[str, str], mapping: Mapping[str, str]) -> Criteria:
    """Build criteria from query parameters.

    Only parameters present in ``mapping`` become filters; blank values are ignored.

    Args:
        params: Request query parameters.
        mapping: Readable name -> backend field name.

    Returns:
        Criteria with mapped filters and no store scope.
    """
    criteria = Criteria()
    for readable_name, backend_name in mapping.items():
        value = params.get(readable_name)
        if value is not None and value.strip():
            criteria.filters[backend_name] = value.strip()
    return criteria


def total_pages(total: int, count: int) -> int:
    """Number of pages of size ``count`` needed for ``total`` records."""
    if count <= 0 or total <= 0:
        return 0
    return (total + count - 1) // count
