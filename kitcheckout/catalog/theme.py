"""
Theme colour helpers.
"""

import re

from kitcheckout.storage.records import Settings

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def is_hex_color(value: str) -> bool:
    return bool(HEX_COLOR.match(value or ""))


def adjust_brightness(hex_color: str, percent: float) -> str:
    """
    Shift each RGB channel by ``percent`` of full scale, clamped to 0..255.

    ``adjust_brightness("#7C3AED", -20)`` darkens by 51 per channel.
    """
    value = int(hex_color.lstrip("#"), 16)
    amount = round(2.55 * percent)

    channels = [(value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF]
    channels = [min(255, max(0, c + amount)) for c in channels]

    return "#{:02x}{:02x}{:02x}".format(*channels)


def theme_palette(settings: Settings) -> dict[str, str]:
    """CSS custom properties for the configured theme."""
    return {
        "--bg-primary": settings.bg_color,
        "--bg-primary-dark": adjust_brightness(settings.bg_color, -20),
        "--text-primary": settings.text_color,
    }
