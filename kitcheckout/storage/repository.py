"""
Collection accessors over the document store.

Each collection is read whole, decoded into records, and written back
whole. A document that cannot be decoded into records is treated like
corrupt text: the failure is logged and the collection default is used.
"""

import threading
from dataclasses import dataclass
from typing import Callable, TypeVar

from loguru import logger

from kitcheckout.errors import StorageReadError
from .defaults import default_settings
from .document_store import DocumentStore
from .records import Equipment, Log, Settings, User

T = TypeVar("T")


@dataclass(frozen=True)
class StorageKeys:
    """Document keys for the four collections."""

    users: str
    equipment: str
    logs: str
    settings: str

    @classmethod
    def with_prefix(cls, prefix: str) -> "StorageKeys":
        return cls(
            users=f"{prefix}users",
            equipment=f"{prefix}equipment",
            logs=f"{prefix}logs",
            settings=f"{prefix}settings",
        )


def _decode_list(decode_item: Callable[[dict], T]) -> Callable[[object], list[T]]:
    def decode(raw):
        if not isinstance(raw, list):
            raise TypeError(f"expected a list, got {type(raw).__name__}")
        return [decode_item(item) for item in raw]
    return decode


def _decode_settings(raw) -> Settings:
    if not isinstance(raw, dict):
        raise TypeError(f"expected an object, got {type(raw).__name__}")
    return Settings.from_dict(raw)


class CheckoutRepository:
    """
    Typed get/save accessors for Users, Equipment, Logs and Settings.

    Services hold ``lock`` around any read-modify-write sequence so that
    concurrent callers sharing this repository apply their changes one at
    a time.

    Usage:
        repo = CheckoutRepository(DocumentStore())

        items = repo.get_equipment()
        items[0].avail -= 1
        repo.save_equipment(items)
    """

    def __init__(self, store: DocumentStore, key_prefix: str = "sports_"):
        self.store = store
        self.keys = StorageKeys.with_prefix(key_prefix)
        self.lock = threading.RLock()

    def _load(self, key: str, decode: Callable[[object], T], default_factory: Callable[[], T]) -> T:
        raw = self.store.read(key, None)
        if raw is None:
            return default_factory()

        try:
            return decode(raw)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            error = StorageReadError(key, f"{type(e).__name__}: {e}")
            logger.warning(f"{error.message}; using default ({error.detail})")
            return default_factory()

    # Users

    def get_users(self) -> list[User]:
        return self._load(self.keys.users, _decode_list(User.from_dict), list)

    def save_users(self, users: list[User]) -> None:
        self.store.write(self.keys.users, [u.to_dict() for u in users])

    def get_user_documents(self) -> list:
        """Raw user documents as stored, including legacy-format and unreadable entries."""
        raw = self.store.read(self.keys.users, [])
        if not isinstance(raw, list):
            logger.warning(f"Ignoring malformed {self.keys.users} document")
            return []
        return list(raw)

    def save_user_documents(self, documents: list[dict]) -> None:
        self.store.write(self.keys.users, documents)

    # Equipment

    def get_equipment(self) -> list[Equipment]:
        return self._load(self.keys.equipment, _decode_list(Equipment.from_dict), list)

    def save_equipment(self, equipment: list[Equipment]) -> None:
        self.store.write(self.keys.equipment, [e.to_dict() for e in equipment])

    # Logs

    def get_logs(self) -> list[Log]:
        return self._load(self.keys.logs, _decode_list(Log.from_dict), list)

    def save_logs(self, logs: list[Log]) -> None:
        self.store.write(self.keys.logs, [log.to_dict() for log in logs])

    # Settings

    def get_settings(self) -> Settings:
        return self._load(self.keys.settings, _decode_settings, default_settings)

    def save_settings(self, settings: Settings) -> None:
        self.store.write(self.keys.settings, settings.to_dict())

    def ensure_default_settings(self) -> bool:
        """
        Persist the default Settings document on first run.

        Returns:
            True if defaults were written
        """
        if self.store.exists(self.keys.settings):
            return False
        self.save_settings(default_settings())
        logger.info("Saved default settings")
        return True
