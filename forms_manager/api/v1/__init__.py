"""API v1 module."""

from fastapi import APIRouter

from forms_manager.api.v1.routers import (
    components_router,
    conditions_router,
    definitions_router,
    forms_router,
    legacy_router,
    lists_router,
    migration_router,
    options_router,
    pages_router,
    secrets_router,
    sections_router,
    versions_router,
)

# Create main v1 router
api_router = APIRouter(prefix="/api/v1")

# Include sub-routers
api_router.include_router(forms_router)
api_router.include_router(definitions_router)
api_router.include_router(pages_router)
api_router.include_router(components_router)
api_router.include_router(lists_router)
api_router.include_router(conditions_router)
api_router.include_router(sections_router)
api_router.include_router(options_router)
api_router.include_router(migration_router)
api_router.include_router(versions_router)
api_router.include_router(secrets_router)
api_router.include_router(legacy_router)


__all__ = ["api_router"]
