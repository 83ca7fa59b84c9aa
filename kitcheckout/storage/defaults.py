"""
Built-in default documents.

First-run Settings ship a sports theme, an icon logo and six categories,
each with an inline SVG image.
"""

from urllib.parse import quote

from .records import Category, Settings


def _svg_data_url(markup: str) -> str:
    return "data:image/svg+xml;utf8," + quote(markup)


SVG_BALL = _svg_data_url(
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 64">'
    '<circle cx="32" cy="32" r="28" fill="#F97316"/>'
    '<path d="M4 32h56M32 4v56M12 12c12 10 12 30 0 40M52 12c-12 10-12 30 0 40" '
    'stroke="#7C2D12" stroke-width="3" fill="none"/></svg>'
)

SVG_RACKET = _svg_data_url(
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 64">'
    '<ellipse cx="26" cy="24" rx="16" ry="20" fill="none" stroke="#2563EB" stroke-width="4"/>'
    '<path d="M36 40l18 18" stroke="#1E3A8A" stroke-width="6" stroke-linecap="round"/></svg>'
)

SVG_EQUIP = _svg_data_url(
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 64">'
    '<rect x="8" y="18" width="48" height="34" rx="6" fill="#6B7280"/>'
    '<rect x="24" y="10" width="16" height="10" rx="3" fill="none" stroke="#374151" stroke-width="4"/></svg>'
)

DEFAULT_ICON = "🏃"
DEFAULT_BG_COLOR = "#7C3AED"
DEFAULT_TEXT_COLOR = "#FFFFFF"


def default_categories() -> list[Category]:
    return [
        Category(id=1, name="Basketball", default_image=SVG_BALL),
        Category(id=2, name="Soccer", default_image=SVG_BALL),
        Category(id=3, name="Badminton", default_image=SVG_RACKET),
        Category(id=4, name="Volleyball", default_image=SVG_BALL),
        Category(id=5, name="Table Tennis", default_image=SVG_RACKET),
        Category(id=6, name="General Equipment", default_image=SVG_EQUIP),
    ]


def default_settings() -> Settings:
    """Fresh copy of the first-run Settings document."""
    return Settings(
        logo_mode="icon",
        icon=DEFAULT_ICON,
        logo_data_url="",
        bg_color=DEFAULT_BG_COLOR,
        text_color=DEFAULT_TEXT_COLOR,
        categories=default_categories(),
    )
