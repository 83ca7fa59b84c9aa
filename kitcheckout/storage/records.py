"""
Record types for the four persisted collections.

Documents are stored with camelCase field names. Each record converts to
and from that shape with ``to_dict`` / ``from_dict``; ``from_dict`` raises
KeyError, TypeError or ValueError on malformed input.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Account role."""
    STUDENT = "student"
    ADMIN = "admin"


class LogoMode(str, Enum):
    """How the app logo is rendered."""
    ICON = "icon"
    IMAGE = "image"


@dataclass
class User:
    """Registered account."""

    email: str
    password_hash: str
    role: Role = Role.STUDENT
    created_at: int = 0  # epoch milliseconds

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            email=data["email"],
            password_hash=data.get("passwordHash", ""),
            role=Role(data.get("role", Role.STUDENT.value)),
            created_at=int(data.get("createdAt", 0)),
        )

    def to_dict(self) -> dict:
        return {
            "email": self.email,
            "passwordHash": self.password_hash,
            "role": self.role.value,
            "createdAt": self.created_at,
        }


@dataclass
class Equipment:
    """Inventory item. ``type`` names a Category (soft reference)."""

    id: int
    name: str
    type: str
    total: int
    avail: int
    photo: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Equipment":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            type=data.get("type", ""),
            total=int(data["total"]),
            avail=int(data["avail"]),
            photo=data.get("photo", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "total": self.total,
            "avail": self.avail,
            "photo": self.photo,
        }


@dataclass
class Log:
    """Loan record. Open while ``return_at`` is None."""

    id: int
    email: str
    equipment_id: int
    name: str
    quantity: int
    borrow_at: str
    return_at: Optional[str] = None
    photo: str = ""
    return_photo: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.return_at is None

    def matches(self, email: str, equipment_id: int) -> bool:
        return self.email == email and self.equipment_id == equipment_id

    @classmethod
    def from_dict(cls, data: dict) -> "Log":
        return cls(
            id=int(data["id"]),
            email=data["email"],
            equipment_id=int(data["equipmentId"]),
            name=data.get("name", ""),
            quantity=int(data["quantity"]),
            borrow_at=data["borrowAt"],
            return_at=data.get("returnAt"),
            photo=data.get("photo", ""),
            return_photo=data.get("returnPhoto"),
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "email": self.email,
            "equipmentId": self.equipment_id,
            "name": self.name,
            "quantity": self.quantity,
            "borrowAt": self.borrow_at,
            "returnAt": self.return_at,
            "photo": self.photo,
        }
        if self.return_photo is not None:
            data["returnPhoto"] = self.return_photo
        return data


@dataclass
class Category:
    """Equipment category. Names are unique case-insensitively."""

    id: int
    name: str
    default_image: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Category":
        return cls(
            id=int(data["id"]),
            name=data["name"],
            default_image=data.get("defaultImage", ""),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "defaultImage": self.default_image,
        }


@dataclass
class Settings:
    """Branding and category taxonomy. Stored as a single document."""

    logo_mode: str
    icon: str
    logo_data_url: str
    bg_color: str
    text_color: str
    categories: list[Category] = field(default_factory=list)

    def find_category(self, category_id: int) -> Optional[Category]:
        return next((c for c in self.categories if c.id == category_id), None)

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        return cls(
            logo_mode=LogoMode(data.get("logoMode", LogoMode.ICON.value)).value,
            icon=data.get("icon", ""),
            logo_data_url=data.get("logoDataUrl", ""),
            bg_color=data["bgColor"],
            text_color=data["textColor"],
            categories=[Category.from_dict(c) for c in data.get("categories", [])],
        )

    def to_dict(self) -> dict:
        return {
            "logoMode": self.logo_mode,
            "icon": self.icon,
            "logoDataUrl": self.logo_data_url,
            "bgColor": self.bg_color,
            "textColor": self.text_color,
            "categories": [c.to_dict() for c in self.categories],
        }
