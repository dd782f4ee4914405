"""API v1 routers."""

from forms_manager.api.v1.routers.components import router as components_router
from forms_manager.api.v1.routers.conditions import router as conditions_router
from forms_manager.api.v1.routers.definitions import router as definitions_router
from forms_manager.api.v1.routers.forms import router as forms_router
from forms_manager.api.v1.routers.health import router as health_router
from forms_manager.api.v1.routers.legacy import router as legacy_router
from forms_manager.api.v1.routers.lists import router as lists_router
from forms_manager.api.v1.routers.migration import router as migration_router
from forms_manager.api.v1.routers.options import router as options_router
from forms_manager.api.v1.routers.pages import router as pages_router
from forms_manager.api.v1.routers.secrets import router as secrets_router
from forms_manager.api.v1.routers.sections import router as sections_router
from forms_manager.api.v1.routers.versions import router as versions_router

__all__ = [
    "components_router",
    "conditions_router",
    "definitions_router",
    "forms_router",
    "health_router",
    "legacy_router",
    "lists_router",
    "migration_router",
    "options_router",
    "pages_router",
    "secrets_router",
    "sections_router",
    "versions_router",
]
