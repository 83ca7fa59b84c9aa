"""
Undo actions for destructive operations.

A destructive operation returns an UndoAction carrying the compensating
step. The action is a small state machine:

    ACTIVE --undo()--> UNDONE
    ACTIVE --window elapsed / expire()--> EXPIRED

Expiry is evaluated lazily whenever the state is read.
"""

import time
import uuid
from enum import Enum
from typing import Callable, Optional

from loguru import logger

from kitcheckout.errors import ConflictError, NotFoundError


class UndoState(str, Enum):
    ACTIVE = "active"
    UNDONE = "undone"
    EXPIRED = "expired"


class UndoAction:
    """Compensating action available for a bounded time window."""

    def __init__(
        self,
        description: str,
        compensate: Callable[[], None],
        window_seconds: float = 5.0,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.id = uuid.uuid4().hex[:12]
        self.description = description
        self._compensate = compensate
        self._timer = timer
        self.deadline = timer() + window_seconds
        self._state = UndoState.ACTIVE

    @property
    def state(self) -> UndoState:
        if self._state == UndoState.ACTIVE and self._timer() > self.deadline:
            self._state = UndoState.EXPIRED
        return self._state

    @property
    def is_active(self) -> bool:
        return self.state == UndoState.ACTIVE

    def expire(self) -> None:
        if self.state == UndoState.ACTIVE:
            self._state = UndoState.EXPIRED

    def undo(self) -> None:
        """
        Run the compensation once.

        Raises:
            ConflictError: UNDO_EXPIRED or UNDO_ALREADY_APPLIED
        """
        state = self.state
        if state == UndoState.EXPIRED:
            raise ConflictError("This action can no longer be undone.", code="UNDO_EXPIRED")
        if state == UndoState.UNDONE:
            raise ConflictError("This action was already undone.", code="UNDO_ALREADY_APPLIED")

        self._compensate()
        self._state = UndoState.UNDONE
        logger.info(f"Undone: {self.description}")


class UndoRegistry:
    """Undo actions addressable by id."""

    def __init__(self):
        self._actions: dict[str, UndoAction] = {}

    def register(self, action: UndoAction) -> str:
        self.prune()
        self._actions[action.id] = action
        return action.id

    def get(self, action_id: str) -> Optional[UndoAction]:
        return self._actions.get(action_id)

    def undo(self, action_id: str) -> UndoAction:
        action = self._actions.get(action_id)
        if action is None:
            raise NotFoundError("Undo action", action_id)
        try:
            action.undo()
        finally:
            if not action.is_active:
                self._actions.pop(action_id, None)
        return action

    def prune(self) -> int:
        """Drop actions that are no longer active."""
        stale = [key for key, action in self._actions.items() if not action.is_active]
        for key in stale:
            del self._actions[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._actions)
