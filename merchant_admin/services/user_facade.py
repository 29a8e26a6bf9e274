"""Admin user facade.

Authorization checks and persistence for admin user accounts. Routes stay
thin: they resolve the request context (store, principal) and call into
this module. Each function runs in its own unit of work.

Authorization failures raise UnauthorizedError; unknown users raise
ResourceNotFoundError.
"""

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from merchant_admin.models import Group, MerchantStore, User
from merchant_admin.schemas import GroupRef, PersistableUser, ReadableUser, ReadableUserList, UserPassword
from merchant_admin.services.authorization import (
    AdminGroup,
    Principal,
    USER_MANAGER_GROUPS,
    holds_any,
    uncovered_groups,
)
from merchant_admin.services.criteria import Criteria, total_pages
from merchant_admin.services.errors import (
    ConflictError,
    OperationNotAllowedError,
    ResourceNotFoundError,
    UnauthorizedError,
)
from merchant_admin.services.security import decode_access_token, hash_password, verify_password
from merchant_admin.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

MAX_PAGE_SIZE = 100


# ============================================================
# Conversions
# ============================================================


def to_readable(user: User) -> ReadableUser:
    """Convert a User row to its API representation (password excluded)."""
    return ReadableUser(
        id=user.id,
        user_name=user.admin_name,
        email_address=user.admin_email,
        first_name=user.first_name,
        last_name=user.last_name,
        default_language=user.default_language,
        active=user.active,
        merchant=user.merchant_store.code,
        groups=[GroupRef(name=name) for name in user.group_names],
        last_access=user.last_access,
        login_time=user.login_time,
    )


def to_principal(user: User) -> Principal:
    return Principal(
        user_id=user.id,
        user_name=user.admin_name,
        store_code=user.merchant_store.code,
        groups=frozenset(user.group_names),
    )


# ============================================================
# Authentication / authorization
# ============================================================


async def authenticated_user(token: str) -> Principal | None:
    """Resolve a bearer token to the acting admin user.

    Returns:
        Principal, or None if the token is invalid/expired or the user is
        missing or inactive.
    """
    claims = decode_access_token(token)
    if claims is None:
        return None

    async with get_session() as session:
        result = await session.execute(select(User).where(User.admin_name == claims["sub"]))
        user = result.scalar_one_or_none()
        if user is None or not user.active:
            return None
        return to_principal(user)


def authorized_group(principal: Principal, groups: Iterable[str | AdminGroup]) -> None:
    """Require the principal to hold at least one of ``groups``.

    Raises:
        UnauthorizedError: If none of the groups is held.
    """
    required = list(groups)
    if not holds_any(principal.groups, required):
        logger.warning("User %s denied: requires one of %s", principal.user_name, required)
        raise UnauthorizedError(
            f"User [{principal.user_name}] not authorized",
            detail={"required": [g.value if isinstance(g, AdminGroup) else g for g in required]},
        )


def authorized_groups(principal: Principal, user: PersistableUser) -> None:
    """Require the principal to manage users and to cover every group of ``user``.

    Raises:
        UnauthorizedError: If the principal is not a user manager or tries to
            assign a group outside its reach.
    """
    authorized_group(principal, USER_MANAGER_GROUPS)
    uncovered = uncovered_groups(principal.groups, user.group_names)
    if uncovered:
        logger.warning("User %s denied assigning groups %s", principal.user_name, uncovered)
        raise UnauthorizedError(
            f"User [{principal.user_name}] not authorized to assign group(s) {uncovered}",
            detail={"groups": uncovered},
        )


def authorized_store(principal: Principal, store_code: str) -> bool:
    """True if the principal may act on ``store_code``."""
    return principal.is_superadmin or principal.store_code == store_code


# ============================================================
# Queries
# ============================================================


async def _resolve_groups(session: AsyncSession, names: Sequence[str]) -> list[Group]:
    if not names:
        return []
    result = await session.execute(select(Group).where(Group.group_name.in_(names)))
    groups = list(result.scalars().all())
    missing = sorted(set(names) - {group.group_name for group in groups})
    if missing:
        raise OperationNotAllowedError(f"Unknown group(s) {missing}", detail={"groups": missing})
    return groups


async def _user_name_taken(session: AsyncSession, user_name: str, exclude_id: int | None = None) -> bool:
    query = select(User.id).where(User.admin_name == user_name)
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    result = await session.execute(query)
    return result.first() is not None


def _in_store(query: Select, store_code: str | None) -> Select:
    if store_code is None:
        return query
    return query.join(User.merchant_store).where(MerchantStore.code == store_code)


async def find_by_id(user_id: int, store_code: str | None) -> ReadableUser:
    """Get a user by id within a store.

    Raises:
        ResourceNotFoundError: If the user does not exist in the store.
    """
    async with get_session() as session:
        result = await session.execute(_in_store(select(User).where(User.id == user_id), store_code))
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError(
                f"User [{user_id}] not found for store [{store_code}]",
                detail={"id": user_id, "store": store_code},
            )
        return to_readable(user)


async def find_by_user_name(user_name: str, store_code: str | None = None) -> ReadableUser:
    """Get a user by username, optionally restricted to a store.

    Raises:
        ResourceNotFoundError: If no such user exists.
    """
    async with get_session() as session:
        result = await session.execute(
            _in_store(select(User).where(User.admin_name == user_name), store_code)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError(
                f"User [{user_name}] not found",
                detail={"userName": user_name, "store": store_code},
            )
        return to_readable(user)


async def list_by_criteria(criteria: Criteria, page: int, count: int) -> ReadableUserList:
    """List users page by page.

    Args:
        criteria: Store scope (None = all stores) and column filters.
        page: Zero-based page index.
        count: Page size (capped at MAX_PAGE_SIZE).

    Returns:
        ReadableUserList with recordsTotal (store scope) and recordsFiltered
        (store scope + filters).
    """
    page = max(page, 0)
    count = min(max(count, 1), MAX_PAGE_SIZE)

    scoped = _in_store(select(User), criteria.store_code)
    filtered = scoped
    for field_name, value in criteria.filters.items():
        column = getattr(User, field_name)
        filtered = filtered.where(func.lower(column).contains(value.lower(), autoescape=True))

    async with get_session() as session:
        records_total = await session.scalar(select(func.count()).select_from(scoped.subquery()))
        records_filtered = await session.scalar(select(func.count()).select_from(filtered.subquery()))
        result = await session.execute(
            filtered.order_by(User.id).offset(page * count).limit(count)
        )
        users = result.scalars().all()
        data = [to_readable(user) for user in users]

    return ReadableUserList(
        data=data,
        total_pages=total_pages(records_filtered or 0, count),
        records_total=records_total or 0,
        records_filtered=records_filtered or 0,
        number=len(data),
    )


# ============================================================
# Mutations
# ============================================================


async def create(user: PersistableUser, store: MerchantStore) -> ReadableUser:
    """Create an admin user in ``store``.

    Raises:
        OperationNotAllowedError: Missing password/groups or unknown group.
        ConflictError: Username already exists.
    """
    if not user.password:
        raise OperationNotAllowedError("Password is required to create a user")
    if not user.groups:
        raise OperationNotAllowedError("At least one group is required")

    async with get_session() as session:
        if await _user_name_taken(session, user.user_name):
            raise ConflictError(
                f"User [{user.user_name}] already exists",
                detail={"userName": user.user_name},
            )
        groups = await _resolve_groups(session, user.group_names)
        merchant_store = await session.get(MerchantStore, store.id)
        if merchant_store is None:
            raise ResourceNotFoundError(f"Merchant store [{store.code}] not found")

        model = User(
            admin_name=user.user_name,
            admin_email=user.email_address,
            admin_password=hash_password(user.password),
            first_name=user.first_name,
            last_name=user.last_name,
            default_language=user.default_language,
            active=user.active,
            merchant_store=merchant_store,
            groups=groups,
            last_access=None,
            login_time=None,
        )
        session.add(model)
        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"User [{user.user_name}] already exists") from exc
        readable = to_readable(model)

    logger.info("Created user %s in store %s", readable.user_name, readable.merchant)
    return readable


async def update(
    user_id: int,
    principal: Principal,
    store_code: str,
    user: PersistableUser,
) -> ReadableUser:
    """Update profile fields and groups of a user in ``store_code``.

    Groups are replaced only when the payload lists some. Passwords are
    changed through change_password().

    Raises:
        ResourceNotFoundError: User not found in the store.
        UnauthorizedError: Target holds groups the principal cannot manage.
        ConflictError: New username already taken.
    """
    async with get_session() as session:
        result = await session.execute(_in_store(select(User).where(User.id == user_id), store_code))
        model = result.scalar_one_or_none()
        if model is None:
            raise ResourceNotFoundError(
                f"User [{user_id}] not found for store [{store_code}]",
                detail={"id": user_id, "store": store_code},
            )
        if model.admin_name != principal.user_name:
            uncovered = uncovered_groups(principal.groups, model.group_names)
            if uncovered:
                raise UnauthorizedError(
                    f"User [{principal.user_name}] cannot modify user [{model.admin_name}]",
                    detail={"groups": uncovered},
                )

        if user.user_name != model.admin_name and await _user_name_taken(
            session, user.user_name, exclude_id=model.id
        ):
            raise ConflictError(
                f"User [{user.user_name}] already exists",
                detail={"userName": user.user_name},
            )

        model.admin_name = user.user_name
        model.admin_email = user.email_address
        model.first_name = user.first_name
        model.last_name = user.last_name
        model.default_language = user.default_language
        model.active = user.active
        if user.groups:
            model.groups = await _resolve_groups(session, user.group_names)

        try:
            await session.flush()
        except IntegrityError as exc:
            raise ConflictError(f"User [{user.user_name}] already exists") from exc
        readable = to_readable(model)

    logger.info("User %s updated by %s", readable.user_name, principal.user_name)
    return readable


async def change_password(user_id: int, principal: Principal, password: UserPassword) -> None:
    """Change a user's password.

    A user may change its own password; SUPERADMIN may change anyone's,
    ADMIN anyone's within its store except holders of groups it cannot
    manage (SUPERADMIN).

    Raises:
        ResourceNotFoundError: Unknown user.
        UnauthorizedError: Principal may not change this user's password.
        OperationNotAllowedError: Current password mismatch or unchanged password.
    """
    async with get_session() as session:
        result = await session.execute(select(User).where(User.id == user_id))
        model = result.scalar_one_or_none()
        if model is None:
            raise ResourceNotFoundError(f"User [{user_id}] not found", detail={"id": user_id})

        if model.admin_name != principal.user_name:
            same_store_admin = (
                principal.is_user_in_role(AdminGroup.ADMIN)
                and model.merchant_store.code == principal.store_code
            )
            if not (principal.is_superadmin or same_store_admin):
                raise UnauthorizedError(
                    f"User [{principal.user_name}] cannot change password of user [{model.admin_name}]"
                )
            uncovered = uncovered_groups(principal.groups, model.group_names)
            if uncovered:
                raise UnauthorizedError(
                    f"User [{principal.user_name}] cannot change password of user [{model.admin_name}]",
                    detail={"groups": uncovered},
                )

        if not verify_password(password.password, model.admin_password):
            raise OperationNotAllowedError("Current password does not match")
        if password.password == password.change_password:
            raise OperationNotAllowedError("New password must differ from the current one")

        model.admin_password = hash_password(password.change_password)

    logger.info("Password changed for user %s by %s", model.admin_name, principal.user_name)


async def delete(user_id: int, store_code: str, principal: Principal) -> None:
    """Delete a user.

    Non-superadmins may only delete users of ``store_code``. Nobody can
    delete itself.

    Raises:
        ResourceNotFoundError: User not found (in scope).
        OperationNotAllowedError: Self deletion.
        UnauthorizedError: Target holds groups the principal cannot manage.
    """
    scope = None if principal.is_superadmin else store_code
    async with get_session() as session:
        result = await session.execute(_in_store(select(User).where(User.id == user_id), scope))
        model = result.scalar_one_or_none()
        if model is None:
            raise ResourceNotFoundError(
                f"User [{user_id}] not found for store [{store_code}]",
                detail={"id": user_id, "store": store_code},
            )
        if model.admin_name == principal.user_name:
            raise OperationNotAllowedError("A user cannot delete itself")
        uncovered = uncovered_groups(principal.groups, model.group_names)
        if uncovered:
            raise UnauthorizedError(
                f"User [{principal.user_name}] cannot delete user [{model.admin_name}]",
                detail={"groups": uncovered},
            )
        user_name = model.admin_name
        await session.delete(model)

    logger.info("User %s deleted by %s", user_name, principal.user_name)
