"""
Unit tests for settings, categories and theme colours.
"""

from dataclasses import replace

import pytest

from kitcheckout.catalog.theme import adjust_brightness, is_hex_color, theme_palette
from kitcheckout.errors import ConflictError, NotFoundError, ValidationError
from kitcheckout.storage.defaults import DEFAULT_BG_COLOR, DEFAULT_TEXT_COLOR, SVG_EQUIP
from kitcheckout.storage.records import Equipment


class TestTheme:
    """Tests for colour helpers."""

    @pytest.mark.parametrize("color,percent,expected", [
        ("#7C3AED", -20, "#4907ba"),
        ("#000000", -20, "#000000"),
        ("#FFFFFF", 20, "#ffffff"),
        ("#102030", 20, "#435363"),
    ])
    def test_adjust_brightness(self, color, percent, expected):
        """Test channel shifts clamp to 0..255."""
        assert adjust_brightness(color, percent) == expected

    def test_is_hex_color(self):
        assert is_hex_color("#7C3AED")
        assert not is_hex_color("7C3AED")
        assert not is_hex_color("#7C3AE")
        assert not is_hex_color("")

    def test_palette(self, catalog):
        """Test the derived CSS variables."""
        palette = theme_palette(catalog.get_settings())

        assert palette == {
            "--bg-primary": DEFAULT_BG_COLOR,
            "--bg-primary-dark": "#4907ba",
            "--text-primary": DEFAULT_TEXT_COLOR,
        }


class TestSettings:
    """Tests for whole-document settings updates."""

    def test_update_replaces_document(self, catalog):
        """Test update_settings persists the full document."""
        settings = replace(catalog.get_settings(), icon="⚽", categories=[])
        catalog.update_settings(settings)

        stored = catalog.get_settings()
        assert stored.icon == "⚽"
        assert stored.categories == []

    def test_invalid_logo_mode(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.update_settings(replace(catalog.get_settings(), logo_mode="banner"))

        assert exc_info.value.code == "INVALID_LOGO_MODE"

    def test_invalid_color(self, catalog):
        """Test malformed colours are rejected and nothing is written."""
        with pytest.raises(ValidationError) as exc_info:
            catalog.set_colors(bg_color="#12345")

        assert exc_info.value.code == "INVALID_COLOR"
        assert catalog.get_settings().bg_color == DEFAULT_BG_COLOR

    def test_set_and_reset_colors(self, catalog):
        catalog.set_colors("#112233", "#000000")
        assert catalog.get_settings().bg_color == "#112233"

        settings = catalog.reset_colors()
        assert (settings.bg_color, settings.text_color) == (DEFAULT_BG_COLOR, DEFAULT_TEXT_COLOR)

    def test_logo_modes(self, catalog):
        """Test switching between icon and image logos."""
        settings = catalog.set_image_logo("data:image/png;base64,LOGO")
        assert settings.logo_mode == "image"
        assert settings.logo_data_url == "data:image/png;base64,LOGO"

        settings = catalog.set_icon_logo("🏀")
        assert settings.logo_mode == "icon"
        assert settings.icon == "🏀"
        assert settings.logo_data_url == "data:image/png;base64,LOGO"


class TestCategories:
    """Tests for category add and delete."""

    def test_add_category(self, catalog):
        """Test a new category gets a fresh id and the fallback image."""
        category = catalog.add_category("  Tennis ")

        assert category.name == "Tennis"
        assert category.default_image == SVG_EQUIP
        assert category.id not in {1, 2, 3, 4, 5, 6}
        assert catalog.get_settings().categories[-1] == category

    def test_duplicate_name_case_insensitive(self, catalog):
        with pytest.raises(ConflictError) as exc_info:
            catalog.add_category("soccer")

        assert exc_info.value.code == "DUPLICATE_NAME"
        assert len(catalog.get_settings().categories) == 6

    def test_empty_name(self, catalog):
        with pytest.raises(ValidationError):
            catalog.add_category("   ")

    def test_in_use_is_exact_name_match(self, catalog, repository):
        """Test usage matches equipment type exactly."""
        repository.save_equipment([Equipment(1, "Ball", "Soccer", 5, 5)])

        assert catalog.is_category_in_use(2)
        assert not catalog.is_category_in_use(1)
        assert not catalog.is_category_in_use(999)

        repository.save_equipment([Equipment(1, "Ball", "soccer", 5, 5)])
        assert not catalog.is_category_in_use(2)

    def test_delete_in_use_blocked(self, catalog, repository):
        """Test a referenced category cannot be deleted."""
        repository.save_equipment([Equipment(1, "Ball", "Soccer", 5, 5)])

        with pytest.raises(ConflictError) as exc_info:
            catalog.delete_category(2, lambda message: True)

        assert exc_info.value.code == "CATEGORY_IN_USE"
        assert exc_info.value.detail == "Soccer"
        assert catalog.get_settings().find_category(2) is not None

    def test_delete_unused(self, catalog):
        prompts = []

        deleted = catalog.delete_category(4, lambda message: prompts.append(message) or True)

        assert deleted is True
        assert prompts == ["Are you sure you want to delete this category?"]
        assert catalog.get_settings().find_category(4) is None

    def test_delete_declined(self, catalog):
        """Test declining the prompt leaves the category."""
        assert catalog.delete_category(4, lambda message: False) is False
        assert catalog.get_settings().find_category(4) is not None

    def test_delete_unknown(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.delete_category(999, lambda message: True)

    def test_category_rename_does_not_cascade(self, catalog, repository):
        """Test equipment keeps a dangling type after its category goes."""
        repository.save_equipment([Equipment(1, "Ball", "Soccer", 5, 5)])
        settings = catalog.get_settings()
        renamed = [replace(c, name="Football") if c.id == 2 else c for c in settings.categories]
        catalog.update_settings(replace(settings, categories=renamed))

        item = repository.get_equipment()[0]
        assert item.type == "Soccer"
        assert catalog.category_for(item) is None
        assert not catalog.is_category_in_use(2)
