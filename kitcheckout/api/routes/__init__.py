"""
API Routes for KitCheckout

Route modules:
- auth: Signup, login, session
- equipment: Inventory CRUD
- loans: Borrow and return
- settings: Branding and categories
- reports: Statistics, history and audit
- undo: Undo of recent deletes
"""

from kitcheckout.api.routes.auth import router as auth_router
from kitcheckout.api.routes.equipment import router as equipment_router
from kitcheckout.api.routes.loans import router as loans_router
from kitcheckout.api.routes.settings import router as settings_router
from kitcheckout.api.routes.reports import router as reports_router
from kitcheckout.api.routes.undo import router as undo_router

__all__ = [
    "auth_router",
    "equipment_router",
    "loans_router",
    "settings_router",
    "reports_router",
    "undo_router",
]
