from .auth import router as auth_router
from .todos import router as todos_router
from .categories import router as categories_router
from .devices import router as devices_router

__all__ = ["auth_router", "todos_router", "categories_router", "devices_router"]
