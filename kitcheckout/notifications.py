"""
Notifications surfaced to the user.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from kitcheckout.ledger.undo import UndoAction


class NotificationKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    """Short transient message, optionally offering an undo."""

    title: str
    message: str
    kind: NotificationKind = NotificationKind.INFO
    undo_action: Optional[UndoAction] = None

    @property
    def can_undo(self) -> bool:
        return self.undo_action is not None and self.undo_action.is_active

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "message": self.message,
            "kind": self.kind.value,
            "undo_action_id": self.undo_action.id if self.undo_action else None,
        }


Notifier = Callable[[Notification], None]


class NotificationCenter:
    """Collects notifications in memory. Usable directly as a Notifier."""

    def __init__(self):
        self.history: list[Notification] = []

    def __call__(self, notification: Notification) -> None:
        self.history.append(notification)

    @property
    def latest(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
