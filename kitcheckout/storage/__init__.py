"""
Storage Module for KitCheckout

Persistent storage for the checkout collections:
- SQLAlchemy-backed JSON document store
- Record types for Users, Equipment, Logs and Settings
- Typed collection accessors with default fallbacks
"""

from kitcheckout.storage.document_store import DocumentStore
from kitcheckout.storage.records import (
    Category,
    Equipment,
    Log,
    LogoMode,
    Role,
    Settings,
    User,
)
from kitcheckout.storage.repository import (
    CheckoutRepository,
    StorageKeys,
)
from kitcheckout.storage.defaults import (
    DEFAULT_BG_COLOR,
    DEFAULT_TEXT_COLOR,
    SVG_EQUIP,
    default_settings,
)

__all__ = [
    # Document Store
    "DocumentStore",
    # Records
    "Category",
    "Equipment",
    "Log",
    "LogoMode",
    "Role",
    "Settings",
    "User",
    # Repository
    "CheckoutRepository",
    "StorageKeys",
    # Defaults
    "DEFAULT_BG_COLOR",
    "DEFAULT_TEXT_COLOR",
    "SVG_EQUIP",
    "default_settings",
]
