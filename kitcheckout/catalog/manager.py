"""
Settings and category management.

Settings are replaced as a whole document on every change. Categories are
referenced from Equipment by name only, so deletion checks for an exact
name match and renames do not cascade.
"""

from dataclasses import replace
from typing import Callable, Optional

from loguru import logger

from kitcheckout.errors import ConflictError, NotFoundError, ValidationError
from kitcheckout.storage.defaults import DEFAULT_BG_COLOR, DEFAULT_TEXT_COLOR, SVG_EQUIP
from kitcheckout.storage.records import Category, Equipment, LogoMode, Settings
from kitcheckout.storage.repository import CheckoutRepository
from kitcheckout.utils import Clock, next_id, utcnow
from .theme import is_hex_color


class CatalogManager:
    """
    Branding settings and the category taxonomy.

    Usage:
        catalog = CatalogManager(repo)

        category = catalog.add_category("Tennis", image_data_url)
        catalog.delete_category(category.id, confirm=lambda message: True)
    """

    def __init__(self, repository: CheckoutRepository, clock: Optional[Clock] = None):
        self.repository = repository
        self.clock = clock or utcnow

    def get_settings(self) -> Settings:
        return self.repository.get_settings()

    @staticmethod
    def validate(settings: Settings) -> None:
        if settings.logo_mode not in {mode.value for mode in LogoMode}:
            raise ValidationError(f"Unknown logo mode '{settings.logo_mode}'.", code="INVALID_LOGO_MODE")
        for label, color in (("Background", settings.bg_color), ("Text", settings.text_color)):
            if not is_hex_color(color):
                raise ValidationError(f"{label} colour must look like #RRGGBB.", code="INVALID_COLOR")

    def update_settings(self, settings: Settings) -> Settings:
        """Replace the whole Settings document."""
        self.validate(settings)
        self.repository.save_settings(settings)
        return settings

    def set_icon_logo(self, icon: str) -> Settings:
        if not icon:
            raise ValidationError("Choose an icon.")
        with self.repository.lock:
            settings = replace(self.get_settings(), logo_mode=LogoMode.ICON.value, icon=icon)
            return self.update_settings(settings)

    def set_image_logo(self, data_url: str) -> Settings:
        if not data_url:
            raise ValidationError("Logo image is empty.")
        with self.repository.lock:
            settings = replace(self.get_settings(), logo_mode=LogoMode.IMAGE.value, logo_data_url=data_url)
            return self.update_settings(settings)

    def set_colors(self, bg_color: Optional[str] = None, text_color: Optional[str] = None) -> Settings:
        with self.repository.lock:
            settings = self.get_settings()
            settings = replace(
                settings,
                bg_color=bg_color or settings.bg_color,
                text_color=text_color or settings.text_color,
            )
            return self.update_settings(settings)

    def reset_colors(self) -> Settings:
        return self.set_colors(DEFAULT_BG_COLOR, DEFAULT_TEXT_COLOR)

    def add_category(self, name: str, default_image: Optional[str] = None) -> Category:
        """
        Append a category.

        Raises:
            ValidationError: Empty name
            ConflictError: DUPLICATE_NAME (case-insensitive)
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name cannot be empty.")

        with self.repository.lock:
            settings = self.get_settings()
            if any(c.name.lower() == name.lower() for c in settings.categories):
                raise ConflictError("Category name already exists.", code="DUPLICATE_NAME")

            category = Category(
                id=next_id((c.id for c in settings.categories), self.clock()),
                name=name,
                default_image=default_image or SVG_EQUIP,
            )
            self.update_settings(replace(settings, categories=[*settings.categories, category]))

        logger.info(f"Added category {category.id} ({category.name})")
        return category

    def is_category_in_use(self, category_id: int) -> bool:
        """True if any Equipment's type equals the category's name exactly."""
        category = self.get_settings().find_category(category_id)
        if category is None:
            return False
        return any(e.type == category.name for e in self.repository.get_equipment())

    def delete_category(self, category_id: int, confirm: Callable[[str], bool]) -> bool:
        """
        Remove a category that no equipment references.

        Returns:
            True if deleted, False if the confirmation was declined

        Raises:
            NotFoundError: Unknown id
            ConflictError: CATEGORY_IN_USE
        """
        settings = self.get_settings()
        category = settings.find_category(category_id)
        if category is None:
            raise NotFoundError("Category", category_id)

        if self.is_category_in_use(category_id):
            raise ConflictError(
                "This category is in use by some equipment.",
                code="CATEGORY_IN_USE",
                detail=category.name,
            )

        if not confirm("Are you sure you want to delete this category?"):
            return False

        with self.repository.lock:
            if self.is_category_in_use(category_id):
                raise ConflictError(
                    "This category is in use by some equipment.",
                    code="CATEGORY_IN_USE",
                    detail=category.name,
                )
            settings = self.get_settings()
            remaining = [c for c in settings.categories if c.id != category_id]
            self.update_settings(replace(settings, categories=remaining))

        logger.info(f"Deleted category {category_id} ({category.name})")
        return True

    def category_for(self, equipment: Equipment) -> Optional[Category]:
        """Category named by ``equipment.type``; None when the name dangles."""
        return next((c for c in self.get_settings().categories if c.name == equipment.type), None)
