"""
Route modules. Import and include in main app.
"""

from api.routes.ping import router as ping_router
from api.routes.root import router as root_router
from api.routes.users import router as users_router

__all__ = ["ping_router", "root_router", "users_router"]
