"""Schemas for catalog endpoints (/api/v1/private/catalog*)."""

from pydantic import BaseModel, Field

from merchant_admin.models.catalog import CatalogEntryType
from merchant_admin.schemas.common import Paginated


class PersistableCatalogEntry(BaseModel):
    """Category or product to attach to a catalog."""

    entry_type: CatalogEntryType = Field(alias="type")
    reference_code: str = Field(alias="code", min_length=1, max_length=100)
    visible: bool = True

    model_config = {"populate_by_name": True}


class PersistableCatalog(BaseModel):
    """Payload for creating a catalog."""

    code: str = Field(min_length=1, max_length=100, pattern=r"\S")
    visible: bool = False
    default_catalog: bool = Field(alias="defaultCatalog", default=False)
    entries: list[PersistableCatalogEntry] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class CatalogPatch(BaseModel):
    """Partial update of catalog flags."""

    visible: bool | None = None
    default_catalog: bool | None = Field(alias="defaultCatalog", default=None)

    model_config = {"populate_by_name": True}


class ReadableCatalogEntry(BaseModel):
    id: int
    entry_type: str = Field(alias="type")
    reference_code: str = Field(alias="code")
    visible: bool

    model_config = {"populate_by_name": True}


class ReadableCatalog(BaseModel):
    """Catalog as returned by the API."""

    id: int
    code: str
    visible: bool
    default_catalog: bool = Field(alias="defaultCatalog")
    store: str
    entries: list[ReadableCatalogEntry] = Field(default_factory=list)

    model_config = {"populate_by_name": True}


class ReadableCatalogList(Paginated):
    """One page of catalogs."""

    data: list[ReadableCatalog] = Field(default_factory=list)
