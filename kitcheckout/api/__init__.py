"""
KitCheckout - FastAPI Backend.

JSON API over the checkout ledger, identity and catalog services.
"""

from .main import create_app, main
from .security import TokenService
from .dependencies import (
    get_settings,
    get_service_container,
    get_current_user,
    require_admin,
)

__all__ = [
    # Application
    "create_app",
    "main",
    "TokenService",
    # Dependencies
    "get_settings",
    "get_service_container",
    "get_current_user",
    "require_admin",
]
