"""API routes."""

from fastapi import APIRouter, Depends

from merchant_admin.routes import auth, catalogs, users
from merchant_admin.routes.deps import request_language

api_router = APIRouter(prefix="/api/v1")

# Login (token issuance)
api_router.include_router(auth.router, tags=["auth"])

# Admin users
api_router.include_router(users.router, tags=["users"], dependencies=[Depends(request_language)])

# Catalogs
api_router.include_router(catalogs.router, tags=["catalogs"], dependencies=[Depends(request_language)])
