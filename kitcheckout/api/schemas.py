"""
API Schemas for KitCheckout

Pydantic models for request validation and response serialization:
- Auth models
- Equipment and loan models
- Settings and category models
- Report models

Design Decisions:
1. Shape checks here, business rules in the services: a request that
   passes these models can still be rejected by the ledger
2. Separate Request/Response: Clear distinction between inputs and outputs
3. Responses validate straight from the storage records (from_attributes)
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from kitcheckout.storage.records import LogoMode, Role
from kitcheckout.utils import utcnow


# =============================================================================
# Auth Schemas
# =============================================================================

class SignupRequest(BaseModel):
    """Account registration request."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=256)
    role: Role = Role.STUDENT
    admin_code: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "jordan@school.edu",
                "password": "goalie123",
                "role": "student",
            }
        }
    )


class LoginRequest(BaseModel):
    """Login request."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Account without credentials."""

    email: str
    role: Role
    created_at: int

    model_config = ConfigDict(from_attributes=True)


class TokenResponse(BaseModel):
    """Session token issued at login."""

    access_token: str
    token_type: str = "bearer"
    user: UserResponse


# =============================================================================
# Equipment Schemas
# =============================================================================

class EquipmentBase(BaseModel):
    """Editable equipment fields."""

    name: str = Field(..., min_length=1, max_length=200)
    type: str = Field("", max_length=200)
    total: int = Field(..., ge=0)
    avail: int = Field(..., ge=0)
    photo: str = ""


class EquipmentCreate(EquipmentBase):
    """Equipment creation request."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Size 7 Basketball",
                "type": "Basketball",
                "total": 10,
                "avail": 10,
            }
        }
    )


class EquipmentUpdate(EquipmentBase):
    """Full replacement of an equipment record."""


class EquipmentResponse(EquipmentBase):
    """Equipment response model."""

    id: int

    model_config = ConfigDict(from_attributes=True)


class BulkDeleteRequest(BaseModel):
    """Delete several equipment records at once."""

    ids: list[int] = Field(..., min_length=1)
    confirm: bool = False


class DeleteResponse(BaseModel):
    """Outcome of a confirmed or declined delete."""

    deleted: bool
    undo_action_id: Optional[str] = None
    message: str


# =============================================================================
# Loan Schemas
# =============================================================================

class BorrowRequest(BaseModel):
    """Borrow request. ``photo`` is the proof image as a data URL."""

    equipment_id: int
    quantity: int = Field(1, ge=1)
    photo: str = Field(..., min_length=1)


class ReturnRequest(BaseModel):
    """Return request with a proof photo."""

    equipment_id: int
    photo: str = Field(..., min_length=1)


class LogResponse(BaseModel):
    """Loan record."""

    id: int
    email: str
    equipment_id: int
    name: str
    quantity: int
    borrow_at: str
    return_at: Optional[str] = None
    photo: str = ""
    return_photo: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class BorrowStatusResponse(BaseModel):
    """Whether the caller holds an open loan for an item."""

    equipment_id: int
    borrowing: bool


# =============================================================================
# Settings Schemas
# =============================================================================

class CategoryResponse(BaseModel):
    """Category in the taxonomy."""

    id: int
    name: str
    default_image: str = ""

    model_config = ConfigDict(from_attributes=True)


class CategoryCreate(BaseModel):
    """New category request."""

    name: str = Field(..., max_length=100)
    default_image: Optional[str] = None


class CategoryUsageResponse(BaseModel):
    category_id: int
    in_use: bool


class SettingsBody(BaseModel):
    """Complete Settings document."""

    logo_mode: LogoMode = LogoMode.ICON
    icon: str = ""
    logo_data_url: str = ""
    bg_color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    text_color: str = Field(..., pattern=r"^#[0-9A-Fa-f]{6}$")
    categories: list[CategoryResponse] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class SettingsResponse(SettingsBody):
    """Settings plus the derived theme palette."""

    palette: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Report Schemas
# =============================================================================

class StatsResponse(BaseModel):
    total: int
    avail: int
    borrowed: int


class DiscrepancyResponse(BaseModel):
    equipment_id: int
    name: str
    total: int
    avail: int
    on_loan: int
    issues: list[str]


class AuditResponse(BaseModel):
    ok: bool
    discrepancies: list[DiscrepancyResponse]
    orphaned_loans: list[LogResponse]


class UndoResponse(BaseModel):
    action_id: str
    state: str
    description: str


# =============================================================================
# System Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    detail: Optional[str] = None
    code: str
    request_id: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str
    environment: str
    components: dict[str, str] = Field(default_factory=dict)
