"""Catalog endpoints.

POST   /private/catalog                       - create catalog
GET    /private/catalogs                      - paginated list for the store
GET    /private/catalog/unique?code=          - code existence check
GET    /private/catalog/{id}                  - catalog with entries
PATCH  /private/catalog/{id}                  - update visible / defaultCatalog
DELETE /private/catalog/{id}                  - delete catalog and its entries
POST   /private/catalog/{id}/entry            - attach category / product
DELETE /private/catalog/{id}/entry/{entryId}  - detach entry

All operations require SUPERADMIN, ADMIN or ADMIN_CATALOGUE and, unless
SUPERADMIN, membership of the request store.
"""

from fastapi import APIRouter, Depends, Path, Query

from merchant_admin.models import MerchantStore
from merchant_admin.routes.deps import merchant_store, require_principal
from merchant_admin.schemas import (
    CatalogPatch,
    EntityExists,
    PersistableCatalog,
    PersistableCatalogEntry,
    ReadableCatalog,
    ReadableCatalogList,
)
from merchant_admin.services import catalog_facade, user_facade
from merchant_admin.services.authorization import CATALOG_GROUPS, Principal
from merchant_admin.services.errors import UnauthorizedError

router = APIRouter()


async def catalog_store(
    store: MerchantStore = Depends(merchant_store),
    principal: Principal = Depends(require_principal),
) -> MerchantStore:
    """Request store, once the principal is allowed to manage its catalogs."""
    user_facade.authorized_group(principal, CATALOG_GROUPS)
    if not user_facade.authorized_store(principal, store.code):
        raise UnauthorizedError(
            f"Operation unauthorized for user [{principal.user_name}] and store [{store.code}]",
            detail={"store": store.code},
        )
    return store


@router.post("/private/catalog", response_model=ReadableCatalog)
async def create_catalog(
    catalog: PersistableCatalog,
    store: MerchantStore = Depends(catalog_store),
) -> ReadableCatalog:
    return await catalog_facade.create(catalog, store)


@router.get("/private/catalogs", response_model=ReadableCatalogList)
async def list_catalogs(
    page: int = Query(default=0, ge=0),
    count: int = Query(default=10, ge=1, le=100),
    code: str | None = Query(default=None, max_length=100),
    store: MerchantStore = Depends(catalog_store),
) -> ReadableCatalogList:
    return await catalog_facade.list_catalogs(store, page, count, code)


@router.get("/private/catalog/unique", response_model=EntityExists)
async def catalog_exists(
    code: str = Query(min_length=1, max_length=100),
    store: MerchantStore = Depends(catalog_store),
) -> EntityExists:
    """Check if a catalog code is already used in the store."""
    return EntityExists(exists=await catalog_facade.code_exists(code, store))


@router.get("/private/catalog/{catalog_id}", response_model=ReadableCatalog)
async def get_catalog(
    catalog_id: int = Path(ge=1),
    store: MerchantStore = Depends(catalog_store),
) -> ReadableCatalog:
    return await catalog_facade.get(catalog_id, store)


@router.patch("/private/catalog/{catalog_id}", response_model=ReadableCatalog)
async def update_catalog(
    patch: CatalogPatch,
    catalog_id: int = Path(ge=1),
    store: MerchantStore = Depends(catalog_store),
) -> ReadableCatalog:
    return await catalog_facade.update(catalog_id, store, patch)


@router.delete("/private/catalog/{catalog_id}")
async def delete_catalog(
    catalog_id: int = Path(ge=1),
    store: MerchantStore = Depends(catalog_store),
) -> None:
    await catalog_facade.delete(catalog_id, store)


@router.post("/private/catalog/{catalog_id}/entry", response_model=ReadableCatalog)
async def add_catalog_entry(
    entry: PersistableCatalogEntry,
    catalog_id: int = Path(ge=1),
    store: MerchantStore = Depends(catalog_store),
) -> ReadableCatalog:
    return await catalog_facade.add_entry(catalog_id, store, entry)


@router.delete("/private/catalog/{catalog_id}/entry/{entry_id}")
async def remove_catalog_entry(
    catalog_id: int = Path(ge=1),
    entry_id: int = Path(ge=1),
    store: MerchantStore = Depends(catalog_store),
) -> None:
    await catalog_facade.remove_entry(catalog_id, entry_id, store)
