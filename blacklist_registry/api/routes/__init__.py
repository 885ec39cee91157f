from blacklist_registry.api.routes.admin import router as admin_router
from blacklist_registry.api.routes.entries import router as entries_router
from blacklist_registry.api.routes.listing import router as listing_router

__all__ = ["admin_router", "entries_router", "listing_router"]
