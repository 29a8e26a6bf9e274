"""Catalog facade.

Persistence for per-store catalogs and their entries. Every operation is
scoped to one merchant store: a catalog of another store is reported as
not found.

Invariants:
- catalog code is unique within a store (ConflictError otherwise)
- at most one default catalog per store (setting a new default clears the old one)
- entries are deleted with their catalog
"""

import logging

from sqlalchemy import func, select, update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from merchant_admin.models import Catalog, CatalogEntry, MerchantStore
from merchant_admin.schemas import (
    CatalogPatch,
    PersistableCatalog,
    PersistableCatalogEntry,
    ReadableCatalog,
    ReadableCatalogEntry,
    ReadableCatalogList,
)
from merchant_admin.services.criteria import total_pages
from merchant_admin.services.errors import ConflictError, ResourceNotFoundError
from merchant_admin.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

MAX_PAGE_SIZE = 100


def to_readable(catalog: Catalog, store_code: str) -> ReadableCatalog:
    return ReadableCatalog(
        id=catalog.id,
        code=catalog.code,
        visible=catalog.visible,
        default_catalog=catalog.default_catalog,
        store=store_code,
        entries=[
            ReadableCatalogEntry(
                id=entry.id,
                entry_type=entry.entry_type,
                reference_code=entry.reference_code,
                visible=entry.visible,
            )
            for entry in catalog.entries
        ],
    )


async def _get_catalog(session: AsyncSession, catalog_id: int, store: MerchantStore) -> Catalog:
    result = await session.execute(
        select(Catalog)
        .options(selectinload(Catalog.entries))
        .where(Catalog.id == catalog_id, Catalog.merchant_id == store.id)
    )
    catalog = result.scalar_one_or_none()
    if catalog is None:
        raise ResourceNotFoundError(
            f"Catalog [{catalog_id}] not found for store [{store.code}]",
            detail={"id": catalog_id, "store": store.code},
        )
    return catalog


async def _clear_default(session: AsyncSession, store: MerchantStore, keep_id: int | None = None) -> None:
    stmt = (
        sql_update(Catalog)
        .where(Catalog.merchant_id == store.id, Catalog.default_catalog.is_(True))
        .values(default_catalog=False)
        .execution_options(synchronize_session=False)
    )
    if keep_id is not None:
        stmt = stmt.where(Catalog.id != keep_id)
    await session.execute(stmt)


def _entry_conflict(entry: PersistableCatalogEntry, catalog_code: str) -> ConflictError:
    return ConflictError(
        f"{entry.entry_type.value.capitalize()} [{entry.reference_code}] "
        f"already in catalog [{catalog_code}]",
        detail={"type": entry.entry_type.value, "code": entry.reference_code},
    )


def _new_entry(entry: PersistableCatalogEntry) -> CatalogEntry:
    return CatalogEntry(
        entry_type=entry.entry_type.value,
        reference_code=entry.reference_code,
        visible=entry.visible,
    )


async def code_exists(code: str, store: MerchantStore) -> bool:
    """True if ``store`` already has a catalog with this code."""
    async with get_session() as session:
        result = await session.execute(
            select(Catalog.id).where(Catalog.merchant_id == store.id, Catalog.code == code.strip())
        )
        return result.first() is not None


async def create(catalog: PersistableCatalog, store: MerchantStore) -> ReadableCatalog:
    """Create a catalog (with optional entries) in ``store``.

    Raises:
        ConflictError: Code already used in this store, or the same entry
            listed twice.
    """
    seen: set[tuple[str, str]] = set()
    for entry in catalog.entries:
        key = (entry.entry_type.value, entry.reference_code)
        if key in seen:
            raise _entry_conflict(entry, catalog.code)
        seen.add(key)

    if await code_exists(catalog.code, store):
        raise ConflictError(
            f"Catalog [{catalog.code}] already exists for store [{store.code}]",
            detail={"code": catalog.code, "store": store.code},
        )

    async with get_session() as session:
        if catalog.default_catalog:
            await _clear_default(session, store)
        model = Catalog(
            merchant_id=store.id,
            code=catalog.code,
            visible=catalog.visible,
            default_catalog=catalog.default_catalog,
            entries=[_new_entry(entry) for entry in catalog.entries],
        )
        session.add(model)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(
                f"Catalog [{catalog.code}] already exists for store [{store.code}]"
            ) from exc
        readable = to_readable(model, store.code)

    logger.info("Created catalog %s in store %s", readable.code, store.code)
    return readable


async def get(catalog_id: int, store: MerchantStore) -> ReadableCatalog:
    async with get_session() as session:
        catalog = await _get_catalog(session, catalog_id, store)
        return to_readable(catalog, store.code)


async def list_catalogs(
    store: MerchantStore,
    page: int,
    count: int,
    code: str | None = None,
) -> ReadableCatalogList:
    """List catalogs of a store, optionally filtered by code substring."""
    page = max(page, 0)
    count = min(max(count, 1), MAX_PAGE_SIZE)

    scoped = select(Catalog).where(Catalog.merchant_id == store.id)
    filtered = scoped
    if code:
        filtered = filtered.where(func.lower(Catalog.code).contains(code.lower(), autoescape=True))

    async with get_session() as session:
        records_total = await session.scalar(select(func.count()).select_from(scoped.subquery()))
        records_filtered = await session.scalar(select(func.count()).select_from(filtered.subquery()))
        result = await session.execute(
            filtered.options(selectinload(Catalog.entries))
            .order_by(Catalog.id)
            .offset(page * count)
            .limit(count)
        )
        data = [to_readable(catalog, store.code) for catalog in result.scalars().all()]

    return ReadableCatalogList(
        data=data,
        total_pages=total_pages(records_filtered or 0, count),
        records_total=records_total or 0,
        records_filtered=records_filtered or 0,
        number=len(data),
    )


async def update(catalog_id: int, store: MerchantStore, patch: CatalogPatch) -> ReadableCatalog:
    """Update visibility / default flags of a catalog."""
    async with get_session() as session:
        catalog = await _get_catalog(session, catalog_id, store)
        if patch.visible is not None:
            catalog.visible = patch.visible
        if patch.default_catalog is not None:
            if patch.default_catalog:
                await _clear_default(session, store, keep_id=catalog.id)
            catalog.default_catalog = patch.default_catalog
        await session.flush()
        return to_readable(catalog, store.code)


async def delete(catalog_id: int, store: MerchantStore) -> None:
    """Delete a catalog and its entries."""
    async with get_session() as session:
        catalog = await _get_catalog(session, catalog_id, store)
        code = catalog.code
        await session.delete(catalog)

    logger.info("Deleted catalog %s from store %s", code, store.code)


async def add_entry(
    catalog_id: int,
    store: MerchantStore,
    entry: PersistableCatalogEntry,
) -> ReadableCatalog:
    """Attach a category or product to a catalog.

    Raises:
        ConflictError: Same type and code already attached.
    """
    async with get_session() as session:
        catalog = await _get_catalog(session, catalog_id, store)
        for existing in catalog.entries:
            if (
                existing.entry_type == entry.entry_type.value
                and existing.reference_code == entry.reference_code
            ):
                raise _entry_conflict(entry, catalog.code)
        catalog.entries.append(_new_entry(entry))
        try:
            await session.flush()
        except IntegrityError as exc:
            raise _entry_conflict(entry, catalog.code) from exc
        return to_readable(catalog, store.code)


async def remove_entry(catalog_id: int, entry_id: int, store: MerchantStore) -> None:
    async with get_session() as session:
        catalog = await _get_catalog(session, catalog_id, store)
        entry = next((e for e in catalog.entries if e.id == entry_id), None)
        if entry is None:
            raise ResourceNotFoundError(
                f"Entry [{entry_id}] not found in catalog [{catalog.code}]",
                detail={"catalogId": catalog_id, "entryId": entry_id},
            )
        catalog.entries.remove(entry)
