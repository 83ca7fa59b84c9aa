"""
Settings API Routes

Branding and category taxonomy. Reads are public so the login screen can
render the logo and theme; changes are admin-only.
"""

from fastapi import APIRouter, Depends, Query, status

from kitcheckout.api.dependencies import get_catalog, require_admin
from kitcheckout.api.schemas import (
    CategoryCreate,
    CategoryResponse,
    CategoryUsageResponse,
    DeleteResponse,
    ErrorResponse,
    SettingsBody,
    SettingsResponse,
)
from kitcheckout.catalog.manager import CatalogManager
from kitcheckout.catalog.theme import theme_palette
from kitcheckout.storage.records import Category, Settings, User

router = APIRouter(prefix="/settings", tags=["settings"])


def _settings_response(settings: Settings) -> SettingsResponse:
    body = SettingsBody.model_validate(settings)
    return SettingsResponse(**body.model_dump(), palette=theme_palette(settings))


@router.get("", response_model=SettingsResponse)
def get_settings_document(catalog: CatalogManager = Depends(get_catalog)):
    """Current settings with the derived theme palette."""
    return _settings_response(catalog.get_settings())


@router.put("", response_model=SettingsResponse)
def replace_settings(
    body: SettingsBody,
    catalog: CatalogManager = Depends(get_catalog),
    admin: User = Depends(require_admin),
):
    """Replace the whole settings document."""
    settings = Settings(
        logo_mode=body.logo_mode.value,
        icon=body.icon,
        logo_data_url=body.logo_data_url,
        bg_color=body.bg_color,
        text_color=body.text_color,
        categories=[Category(c.id, c.name, c.default_image) for c in body.categories],
    )
    return _settings_response(catalog.update_settings(settings))


@router.post("/colors/reset", response_model=SettingsResponse)
def reset_colors(
    catalog: CatalogManager = Depends(get_catalog),
    admin: User = Depends(require_admin),
):
    """Restore the default theme colours."""
    return _settings_response(catalog.reset_colors())


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse, "description": "Category name already exists"}},
)
def add_category(
    body: CategoryCreate,
    catalog: CatalogManager = Depends(get_catalog),
    admin: User = Depends(require_admin),
):
    """Add a category."""
    return CategoryResponse.model_validate(catalog.add_category(body.name, body.default_image))


@router.get("/categories/{category_id}/in-use", response_model=CategoryUsageResponse)
def category_in_use(
    category_id: int,
    catalog: CatalogManager = Depends(get_catalog),
):
    """Whether any equipment references the category by name."""
    return CategoryUsageResponse(category_id=category_id, in_use=catalog.is_category_in_use(category_id))


@router.delete(
    "/categories/{category_id}",
    response_model=DeleteResponse,
    responses={409: {"model": ErrorResponse, "description": "Category in use"}},
)
def delete_category(
    category_id: int,
    confirm: bool = Query(False, description="Must be true to delete"),
    catalog: CatalogManager = Depends(get_catalog),
    admin: User = Depends(require_admin),
):
    """Delete an unused category."""
    if not catalog.delete_category(category_id, lambda message: confirm):
        return DeleteResponse(deleted=False, message="Delete not confirmed.")
    return DeleteResponse(deleted=True, message="Category deleted.")
