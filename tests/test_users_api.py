"""Tests for admin user endpoints against a SQLite database."""

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from merchant_admin.models import User
from merchant_admin.services.security import verify_password
from merchant_admin.stores.postgres import get_session
from tests.conftest import PASSWORD, Seed, auth_headers

API = "/api/v1/private"


def new_user(name: str, *groups: str) -> dict:
    return {
        "userName": name,
        "emailAddress": f"{name}@example.com",
        "firstName": "New",
        "lastName": "User",
        "password": "initial-password",
        "groups": [{"name": g} for g in groups],
    }


# ============================================================
# get / profile
# ============================================================


@pytest.mark.asyncio
async def test_get_user_by_id(client: AsyncClient, seed: Seed):
    response = await client.get(
        f"{API}/users/{seed.users['cataloguer']}",
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["userName"] == "cataloguer"
    assert data["emailAddress"] == "cataloguer@example.com"
    assert data["merchant"] == "DEFAULT"
    assert data["groups"] == [{"name": "ADMIN_CATALOGUE"}]
    assert "password" not in data
    assert "adminPassword" not in data
    assert response.headers["Content-Language"] == "en"


@pytest.mark.asyncio
async def test_get_user_of_another_store_is_not_found(client: AsyncClient, seed: Seed):
    response = await client.get(
        f"{API}/users/{seed.users['other_admin']}",
        headers=auth_headers("admin"),
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_unknown_store_is_not_found(client: AsyncClient, seed: Seed):
    response = await client.get(
        f"{API}/users/{seed.users['admin']}",
        params={"store": "NOPE"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_profile_returns_authenticated_user(client: AsyncClient, seed: Seed):
    response = await client.get(f"{API}/user/profile", headers=auth_headers("other_admin"))
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == seed.users["other_admin"]
    assert data["merchant"] == "OTHER"


@pytest.mark.asyncio
async def test_inactive_user_token_is_rejected(client: AsyncClient, seed: Seed):
    async with get_session() as session:
        user = await session.get(User, seed.users["admin"])
        user.active = False

    response = await client.get(f"{API}/user/profile", headers=auth_headers("admin"))
    assert response.status_code == 401


# ============================================================
# create
# ============================================================


@pytest.mark.asyncio
async def test_admin_creates_user_in_own_store(client: AsyncClient, seed: Seed):
    response = await client.post(
        f"{API}/user/",
        json=new_user("orders", "ADMIN_ORDER"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["userName"] == "orders"
    assert data["merchant"] == "DEFAULT"
    assert data["groups"] == [{"name": "ADMIN_ORDER"}]

    async with get_session() as session:
        result = await session.execute(select(User).where(User.admin_name == "orders"))
        user = result.scalar_one()
        assert user.admin_password != "initial-password"
        assert verify_password("initial-password", user.admin_password)


@pytest.mark.asyncio
async def test_admin_cannot_create_user_in_another_store(client: AsyncClient, seed: Seed):
    response = await client.post(
        f"{API}/user/",
        params={"store": "OTHER"},
        json=new_user("intruder", "ADMIN_ORDER"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 401
    assert "store [OTHER]" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_superadmin_creates_user_in_any_store(client: AsyncClient, seed: Seed):
    response = await client.post(
        f"{API}/user/",
        params={"store": "OTHER"},
        json=new_user("remote", "ADMIN"),
        headers=auth_headers("super"),
    )
    assert response.status_code == 200
    assert response.json()["merchant"] == "OTHER"


@pytest.mark.asyncio
async def test_admin_cannot_grant_superadmin(client: AsyncClient, seed: Seed):
    response = await client.post(
        f"{API}/user/",
        json=new_user("escalate", "SUPERADMIN"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 401
    assert response.json()["error"]["detail"] == {"groups": ["SUPERADMIN"]}


@pytest.mark.asyncio
async def test_non_admin_cannot_create_users(client: AsyncClient, seed: Seed):
    response = await client.post(
        f"{API}/user/",
        json=new_user("helper", "ADMIN_CATALOGUE"),
        headers=auth_headers("cataloguer"),
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_duplicate_user_name_conflicts(client: AsyncClient, seed: Seed):
    response = await client.post(
        f"{API}/user/",
        json=new_user("cataloguer", "ADMIN_CATALOGUE"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_requires_password_and_known_groups(client: AsyncClient, seed: Seed):
    payload = new_user("nopass", "ADMIN_ORDER")
    del payload["password"]
    response = await client.post(f"{API}/user/", json=payload, headers=auth_headers("admin"))
    assert response.status_code == 400

    response = await client.post(
        f"{API}/user/",
        json=new_user("ghost", "NOT_A_GROUP"),
        headers=auth_headers("super"),
    )
    assert response.status_code == 400
    assert response.json()["error"]["detail"] == {"groups": ["NOT_A_GROUP"]}


# ============================================================
# update
# ============================================================


@pytest.mark.asyncio
async def test_admin_updates_user_in_own_store(client: AsyncClient, seed: Seed):
    payload = new_user("cataloguer", "ADMIN_CATALOGUE", "ADMIN_CONTENT")
    payload["emailAddress"] = "catalog@example.com"
    response = await client.put(
        f"{API}/user/{seed.users['cataloguer']}",
        json=payload,
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200
    data = response.json()
    assert data["emailAddress"] == "catalog@example.com"
    assert data["groups"] == [{"name": "ADMIN_CATALOGUE"}, {"name": "ADMIN_CONTENT"}]


@pytest.mark.asyncio
async def test_admin_cannot_update_user_of_another_store(client: AsyncClient, seed: Seed):
    response = await client.put(
        f"{API}/user/{seed.users['cataloguer']}",
        json=new_user("cataloguer", "ADMIN_CATALOGUE"),
        headers=auth_headers("other_admin"),
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_in_foreign_store_is_unauthorized_for_any_id(client: AsyncClient, seed: Seed):
    for user_id in (seed.users["other_admin"], 99999):
        response = await client.put(
            f"{API}/user/{user_id}",
            params={"store": "OTHER"},
            json=new_user("renamed", "ADMIN"),
            headers=auth_headers("admin"),
        )
        assert response.status_code == 401
        assert response.json()["error"]["detail"] == {"store": "OTHER"}

    response = await client.put(
        f"{API}/user/99999",
        json=new_user("renamed", "ADMIN"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_cannot_modify_superadmin(client: AsyncClient, seed: Seed):
    response = await client.put(
        f"{API}/user/{seed.users['super']}",
        json=new_user("super", "ADMIN"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_update_to_taken_user_name_conflicts(client: AsyncClient, seed: Seed):
    response = await client.put(
        f"{API}/user/{seed.users['cataloguer']}",
        json=new_user("admin", "ADMIN_CATALOGUE"),
        headers=auth_headers("admin"),
    )
    assert response.status_code == 409


# ============================================================
# password
# ============================================================


@pytest.mark.asyncio
async def test_user_changes_own_password(client: AsyncClient, seed: Seed):
    response = await client.patch(
        f"{API}/user/{seed.users['cataloguer']}/password",
        json={"password": PASSWORD, "changePassword": "brand-new-password"},
        headers=auth_headers("cataloguer"),
    )
    assert response.status_code == 200

    async with get_session() as session:
        user = await session.get(User, seed.users["cataloguer"])
        assert verify_password("brand-new-password", user.admin_password)


@pytest.mark.asyncio
async def test_password_change_requires_current_password(client: AsyncClient, seed: Seed):
    response = await client.patch(
        f"{API}/user/{seed.users['cataloguer']}/password",
        json={"password": "wrong-password", "changePassword": "brand-new-password"},
        headers=auth_headers("cataloguer"),
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cannot_change_password_of_someone_else(client: AsyncClient, seed: Seed):
    response = await client.patch(
        f"{API}/user/{seed.users['admin']}/password",
        json={"password": PASSWORD, "changePassword": "brand-new-password"},
        headers=auth_headers("cataloguer"),
    )
    assert response.status_code == 401

    response = await client.patch(
        f"{API}/user/{seed.users['cataloguer']}/password",
        json={"password": PASSWORD, "changePassword": "brand-new-password"},
        headers=auth_headers("other_admin"),
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_password_change_limited_to_managed_users(client: AsyncClient, seed: Seed):
    response = await client.patch(
        f"{API}/user/{seed.users['super']}/password",
        json={"password": PASSWORD, "changePassword": "brand-new-password"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 401
    assert response.json()["error"]["detail"] == {"groups": ["SUPERADMIN"]}

    async with get_session() as session:
        user = await session.get(User, seed.users["super"])
        assert verify_password(PASSWORD, user.admin_password)

    response = await client.patch(
        f"{API}/user/{seed.users['cataloguer']}/password",
        json={"password": PASSWORD, "changePassword": "brand-new-password"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200


# ============================================================
# list
# ============================================================


@pytest.mark.asyncio
async def test_admin_lists_only_own_store(client: AsyncClient, seed: Seed):
    response = await client.get(f"{API}/users", headers=auth_headers("admin"))
    assert response.status_code == 200
    data = response.json()
    names = {user["userName"] for user in data["data"]}
    assert names == {"super", "admin", "cataloguer"}
    assert data["recordsTotal"] == 3
    assert data["totalPages"] == 1


@pytest.mark.asyncio
async def test_admin_cannot_list_another_store(client: AsyncClient, seed: Seed):
    response = await client.get(
        f"{API}/users",
        params={"store": "OTHER"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_superadmin_lists_all_stores(client: AsyncClient, seed: Seed):
    response = await client.get(f"{API}/users", headers=auth_headers("super"))
    assert response.status_code == 200
    data = response.json()
    assert data["recordsTotal"] == 4
    assert {user["merchant"] for user in data["data"]} == {"DEFAULT", "OTHER"}


@pytest.mark.asyncio
async def test_list_requires_admin_group(client: AsyncClient, seed: Seed):
    response = await client.get(f"{API}/users", headers=auth_headers("cataloguer"))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_filters_and_pages(client: AsyncClient, seed: Seed):
    response = await client.get(
        f"{API}/users",
        params={"userName": "ADMIN"},
        headers=auth_headers("super"),
    )
    data = response.json()
    assert {user["userName"] for user in data["data"]} == {"admin", "other_admin"}
    assert data["recordsFiltered"] == 2
    assert data["recordsTotal"] == 4

    response = await client.get(
        f"{API}/users",
        params={"page": 1, "count": 3},
        headers=auth_headers("super"),
    )
    data = response.json()
    assert data["number"] == 1
    assert data["totalPages"] == 2
    assert data["data"][0]["userName"] == "other_admin"


# ============================================================
# delete
# ============================================================


@pytest.mark.asyncio
async def test_admin_deletes_user_in_own_store(client: AsyncClient, seed: Seed):
    response = await client.delete(
        f"{API}/user/{seed.users['cataloguer']}",
        headers=auth_headers("admin"),
    )
    assert response.status_code == 200

    response = await client.get(
        f"{API}/users/{seed.users['cataloguer']}",
        headers=auth_headers("admin"),
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_cannot_delete_outside_own_store(client: AsyncClient, seed: Seed):
    response = await client.delete(
        f"{API}/user/{seed.users['other_admin']}",
        params={"store": "OTHER"},
        headers=auth_headers("admin"),
    )
    assert response.status_code == 401

    response = await client.delete(
        f"{API}/user/{seed.users['other_admin']}",
        headers=auth_headers("admin"),
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_superadmin_deletes_in_any_store(client: AsyncClient, seed: Seed):
    response = await client.delete(
        f"{API}/user/{seed.users['other_admin']}",
        headers=auth_headers("super"),
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_delete_guards(client: AsyncClient, seed: Seed):
    response = await client.delete(f"{API}/user/{seed.users['admin']}", headers=auth_headers("admin"))
    assert response.status_code == 400

    response = await client.delete(f"{API}/user/{seed.users['super']}", headers=auth_headers("admin"))
    assert response.status_code == 401

    response = await client.delete(
        f"{API}/user/{seed.users['admin']}",
        headers=auth_headers("cataloguer"),
    )
    assert response.status_code == 401


# ============================================================
# exists
# ============================================================


@pytest.mark.asyncio
async def test_exists_for_known_and_unknown_user_names(client: AsyncClient, seed: Seed):
    headers = auth_headers("admin")

    response = await client.post(f"{API}/user/unique", json={"unique": "cataloguer"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"exists": True}

    response = await client.post(f"{API}/user/unique", json={"unique": "nobody"}, headers=headers)
    assert response.status_code == 200
    assert response.json() == {"exists": False}


@pytest.mark.asyncio
async def test_exists_is_scoped_by_merchant(client: AsyncClient, seed: Seed):
    headers = auth_headers("admin")

    response = await client.post(
        f"{API}/user/unique",
        json={"unique": "other_admin", "merchant": "OTHER"},
        headers=headers,
    )
    assert response.json() == {"exists": True}

    response = await client.post(
        f"{API}/user/unique",
        json={"unique": "other_admin", "merchant": "DEFAULT"},
        headers=headers,
    )
    assert response.json() == {"exists": False}
