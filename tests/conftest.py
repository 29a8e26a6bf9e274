"""Shared fixtures: SQLite-backed database, seeded tenants and an ASGI client."""

from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient

from merchant_admin.main import app
from merchant_admin.models import Group, MerchantStore, User
from merchant_admin.services.authorization import AdminGroup
from merchant_admin.services.security import create_access_token, hash_password
from merchant_admin.stores.postgres import close_db, create_tables, drop_tables, get_session, init_db

PASSWORD = "secret-password"


@dataclass
class Seed:
    """Ids of seeded rows.

    Stores: DEFAULT, OTHER.
    Users: super (SUPERADMIN, DEFAULT), admin (ADMIN, DEFAULT),
    cataloguer (ADMIN_CATALOGUE, DEFAULT), other_admin (ADMIN, OTHER).
    """

    default_store_id: int
    other_store_id: int
    users: dict[str, int]


def auth_headers(user_name: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_name)}"}


@pytest.fixture
async def db(tmp_path):
    """Fresh SQLite database per test."""
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await create_tables()
    yield
    await drop_tables()
    await close_db()


@pytest.fixture
async def seed(db) -> Seed:
    async with get_session() as session:
        default_store = MerchantStore(code="DEFAULT", name="Default store", default_language="en")
        other_store = MerchantStore(code="OTHER", name="Other store", default_language="fr")
        session.add_all([default_store, other_store])

        groups = {g.value: Group(group_name=g.value) for g in AdminGroup}
        session.add_all(groups.values())

        def make_user(name: str, store: MerchantStore, group: AdminGroup) -> User:
            return User(
                admin_name=name,
                admin_email=f"{name}@example.com",
                admin_password=hash_password(PASSWORD),
                first_name=name.title(),
                last_name="Test",
                default_language="en",
                active=True,
                merchant_store=store,
                groups=[groups[group.value]],
            )

        users = [
            make_user("super", default_store, AdminGroup.SUPERADMIN),
            make_user("admin", default_store, AdminGroup.ADMIN),
            make_user("cataloguer", default_store, AdminGroup.ADMIN_CATALOGUE),
            make_user("other_admin", other_store, AdminGroup.ADMIN),
        ]
        session.add_all(users)
        await session.flush()

        return Seed(
            default_store_id=default_store.id,
            other_store_id=other_store.id,
            users={user.admin_name: user.id for user in users},
        )


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
