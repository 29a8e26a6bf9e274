"""Admin user endpoints.

GET    /private/users/{id}            - user profile
POST   /private/user/                 - create user (SUPERADMIN / ADMIN)
PUT    /private/user/{id}             - update user
PATCH  /private/user/{id}/password    - change password
GET    /private/users                 - paginated list (SUPERADMIN / ADMIN)
DELETE /private/user/{id}             - delete user (SUPERADMIN / ADMIN)
POST   /private/user/unique           - username existence check
GET    /private/user/profile          - authenticated user profile

Routers are thin: authorization rules and persistence live in user_facade.
"""

from fastapi import APIRouter, Depends, Path, Query, Request

from merchant_admin.models import MerchantStore
from merchant_admin.routes.deps import current_principal, merchant_store, require_principal
from merchant_admin.schemas import (
    EntityExists,
    PersistableUser,
    ReadableUser,
    ReadableUserList,
    UniqueEntity,
    UserPassword,
)
from merchant_admin.services import store_facade, user_facade
from merchant_admin.services.authorization import ADMIN_GROUPS, AdminGroup, Principal
from merchant_admin.services.criteria import USER_MAPPING_FIELDS, build_criteria
from merchant_admin.services.errors import ResourceNotFoundError, UnauthorizedError

router = APIRouter()


def _store_unauthorized(principal: Principal, store_code: str) -> UnauthorizedError:
    return UnauthorizedError(
        f"Operation unauthorized for user [{principal.user_name}] and store [{store_code}]",
        detail={"store": store_code},
    )


@router.get(
    "/private/users/{user_id}",
    response_model=ReadableUser,
    dependencies=[Depends(require_principal)],
)
async def get_user(
    user_id: int = Path(ge=1),
    store: MerchantStore = Depends(merchant_store),
) -> ReadableUser:
    """Get a specific user profile by user id."""
    return await user_facade.find_by_id(user_id, store.code)


@router.post("/private/user/", response_model=ReadableUser)
async def create_user(
    user: PersistableUser,
    store: MerchantStore = Depends(merchant_store),
    principal: Principal | None = Depends(current_principal),
) -> ReadableUser:
    """Create a new admin user in the request store.

    The caller must be SUPERADMIN or ADMIN, must be allowed to assign every
    requested group and, unless SUPERADMIN, must belong to the store.
    """
    if principal is None:
        raise UnauthorizedError()

    user_facade.authorized_group(principal, ADMIN_GROUPS)
    user_facade.authorized_groups(principal, user)

    target = await store_facade.get(store.code)

    if not principal.is_user_in_role(AdminGroup.SUPERADMIN):
        if not user_facade.authorized_store(principal, target.code):
            raise _store_unauthorized(principal, target.code)

    return await user_facade.create(user, target)


@router.put("/private/user/{user_id}", response_model=ReadableUser)
async def update_user(
    user: PersistableUser,
    user_id: int = Path(ge=1),
    store: MerchantStore = Depends(merchant_store),
    principal: Principal | None = Depends(current_principal),
) -> ReadableUser:
    """Update a user.

    Non-superadmins are limited to their own store, checked before the
    user lookup.
    """
    if principal is None:
        raise UnauthorizedError()

    user_facade.authorized_groups(principal, user)

    if not user_facade.authorized_store(principal, store.code):
        raise _store_unauthorized(principal, store.code)

    return await user_facade.update(user_id, principal, store.code, user)


@router.patch("/private/user/{user_id}/password")
async def change_password(
    password: UserPassword,
    user_id: int = Path(ge=1),
    principal: Principal | None = Depends(current_principal),
) -> None:
    """Update a user password."""
    if principal is None:
        raise UnauthorizedError()

    await user_facade.change_password(user_id, principal, password)


@router.get("/private/users", response_model=ReadableUserList)
async def list_users(
    request: Request,
    page: int = Query(default=0, ge=0),
    count: int = Query(default=10, ge=1, le=100),
    store: MerchantStore = Depends(merchant_store),
    principal: Principal | None = Depends(current_principal),
) -> ReadableUserList:
    """List users.

    SUPERADMIN sees every store; other admins only their own store.
    Filters: ``emailAddress``, ``userName`` (substring, case-insensitive).
    """
    if principal is None:
        raise UnauthorizedError()

    criteria = build_criteria(request.query_params, USER_MAPPING_FIELDS)
    criteria.store_code = store.code

    if principal.is_user_in_role(AdminGroup.SUPERADMIN):
        criteria.store_code = None
    elif not user_facade.authorized_store(principal, store.code):
        raise _store_unauthorized(principal, store.code)

    user_facade.authorized_group(principal, ADMIN_GROUPS)

    return await user_facade.list_by_criteria(criteria, page, count)


@router.delete("/private/user/{user_id}")
async def delete_user(
    user_id: int = Path(ge=1),
    store: MerchantStore = Depends(merchant_store),
    principal: Principal | None = Depends(current_principal),
) -> None:
    """Delete a user."""
    if principal is None:
        raise UnauthorizedError()

    if not principal.is_user_in_role(AdminGroup.SUPERADMIN):
        if not user_facade.authorized_store(principal, store.code):
            raise _store_unauthorized(principal, store.code)

    user_facade.authorized_group(principal, ADMIN_GROUPS)

    await user_facade.delete(user_id, store.code, principal)


@router.post(
    "/private/user/unique",
    response_model=EntityExists,
    dependencies=[Depends(require_principal)],
)
async def user_exists(user_name: UniqueEntity) -> EntityExists:
    """Check if a username already exists (optionally within ``merchant``)."""
    try:
        await user_facade.find_by_user_name(user_name.unique, user_name.merchant)
    except ResourceNotFoundError:
        return EntityExists(exists=False)
    return EntityExists(exists=True)


@router.get("/private/user/profile", response_model=ReadableUser)
async def get_auth_user(
    principal: Principal = Depends(require_principal),
) -> ReadableUser:
    """Get the logged in user profile."""
    return await user_facade.find_by_user_name(principal.user_name)
