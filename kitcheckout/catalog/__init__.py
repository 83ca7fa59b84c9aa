"""
Catalog Module for KitCheckout

Global configuration:
- Logo, colours and derived theme palette
- Category taxonomy with in-use checks
"""

from kitcheckout.catalog.manager import CatalogManager
from kitcheckout.catalog.theme import (
    adjust_brightness,
    is_hex_color,
    theme_palette,
)

__all__ = [
    "CatalogManager",
    "adjust_brightness",
    "is_hex_color",
    "theme_palette",
]
