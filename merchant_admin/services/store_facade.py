"""Merchant store lookups."""

from sqlalchemy import select

from merchant_admin.models import MerchantStore
from merchant_admin.services.errors import ResourceNotFoundError
from merchant_admin.stores.postgres import get_session


async def get(code: str) -> MerchantStore:
    """Get a merchant store by code.

    Raises:
        ResourceNotFoundError: If no store has this code.
    """
    async with get_session() as session:
        result = await session.execute(select(MerchantStore).where(MerchantStore.code == code))
        store = result.scalar_one_or_none()

    if store is None:
        raise ResourceNotFoundError(
            f"Merchant store [{code}] not found",
            detail={"store": code},
        )
    return store
