"""
Admin inventory management.

Add, edit and delete Equipment records. Edits write ``total`` and
``avail`` directly and may break the ledger's conservation tie; that is
allowed. Deletes never cascade to Logs and always go through a
confirmation prompt.
"""

import time
from typing import Callable, Iterable, Optional

from loguru import logger

from kitcheckout.errors import NotFoundError, ValidationError
from kitcheckout.storage.defaults import SVG_EQUIP
from kitcheckout.storage.records import Equipment
from kitcheckout.storage.repository import CheckoutRepository
from kitcheckout.utils import Clock, next_id, utcnow
from .undo import UndoAction, UndoRegistry

ConfirmPrompt = Callable[[str], bool]


class InventoryManager:
    """
    Equipment CRUD for admins.

    Usage:
        inventory = InventoryManager(repo, undo_registry)

        item = inventory.save(Equipment(id=0, name="Ball", type="Soccer", total=5, avail=5))
        action = inventory.delete(item.id, confirm=lambda message: True)
        action.undo()
    """

    def __init__(
        self,
        repository: CheckoutRepository,
        undo_registry: Optional[UndoRegistry] = None,
        undo_window_seconds: float = 5.0,
        clock: Optional[Clock] = None,
        timer: Callable[[], float] = time.monotonic,
    ):
        self.repository = repository
        self.undo_registry = undo_registry or UndoRegistry()
        self.undo_window_seconds = undo_window_seconds
        self.clock = clock or utcnow
        self.timer = timer

    def list_equipment(self) -> list[Equipment]:
        return self.repository.get_equipment()

    def get(self, equipment_id: int) -> Equipment:
        item = next((e for e in self.repository.get_equipment() if e.id == equipment_id), None)
        if item is None:
            raise NotFoundError("Equipment", equipment_id)
        return item

    @staticmethod
    def validate(item: Equipment) -> None:
        if not (item.name or "").strip():
            raise ValidationError("Equipment name cannot be empty.")
        if item.total < 0:
            raise ValidationError("Total cannot be negative.", code="INVALID_TOTAL")
        if item.avail < 0 or item.avail > item.total:
            raise ValidationError(
                "Available must be between 0 and total.",
                code="INVALID_AVAILABILITY",
                detail=f"avail={item.avail}, total={item.total}",
            )

    def _default_photo(self, category_name: str) -> str:
        settings = self.repository.get_settings()
        category = next((c for c in settings.categories if c.name == category_name), None)
        return (category.default_image if category else "") or SVG_EQUIP

    def save(self, item: Equipment) -> Equipment:
        """
        Add a new item (``id`` 0 or None) or replace an existing one.

        Raises:
            ValidationError: Empty name or counts out of range
            NotFoundError: Editing an unknown id
        """
        self.validate(item)

        with self.repository.lock:
            equipment = self.repository.get_equipment()
            photo = item.photo or self._default_photo(item.type)

            if item.id:
                index = next((i for i, e in enumerate(equipment) if e.id == item.id), None)
                if index is None:
                    raise NotFoundError("Equipment", item.id)
                saved = Equipment(item.id, item.name.strip(), item.type, item.total, item.avail, photo)
                equipment[index] = saved
                logger.info(f"Updated equipment {saved.id} ({saved.name})")
            else:
                new_id = next_id((e.id for e in equipment), self.clock())
                saved = Equipment(new_id, item.name.strip(), item.type, item.total, item.avail, photo)
                equipment.append(saved)
                logger.info(f"Added equipment {saved.id} ({saved.name})")

            self.repository.save_equipment(equipment)
        return saved

    def delete(self, equipment_id: int, confirm: ConfirmPrompt) -> Optional[UndoAction]:
        """
        Delete one item after confirmation.

        Returns:
            UndoAction re-inserting the item, or None if not confirmed
        """
        return self.bulk_delete(
            [equipment_id],
            confirm,
            prompt="Are you sure you want to delete this item?",
        )

    def bulk_delete(
        self,
        equipment_ids: Iterable[int],
        confirm: ConfirmPrompt,
        prompt: Optional[str] = None,
    ) -> Optional[UndoAction]:
        """
        Delete several items after a single confirmation.

        Logs referencing the deleted ids are kept.

        Returns:
            UndoAction re-inserting the items, or None if not confirmed

        Raises:
            ValidationError: No ids given
            NotFoundError: Any id is unknown
        """
        ids = list(dict.fromkeys(equipment_ids))
        if not ids:
            raise ValidationError("No equipment selected.")

        known = {e.id for e in self.repository.get_equipment()}
        missing = [i for i in ids if i not in known]
        if missing:
            raise NotFoundError("Equipment", missing[0])

        if not confirm(prompt or f"Delete {len(ids)} selected items?"):
            logger.info("Equipment delete cancelled")
            return None

        selected = set(ids)
        with self.repository.lock:
            equipment = self.repository.get_equipment()
            deleted = [e for e in equipment if e.id in selected]
            self.repository.save_equipment([e for e in equipment if e.id not in selected])
        logger.info(f"Deleted equipment {sorted(selected)}")

        action = UndoAction(
            description=f"Restore {len(deleted)} deleted item(s)",
            compensate=lambda: self._restore(deleted),
            window_seconds=self.undo_window_seconds,
            timer=self.timer,
        )
        self.undo_registry.register(action)
        return action

    def _restore(self, items: list[Equipment]) -> None:
        with self.repository.lock:
            current = self.repository.get_equipment()
            present = {e.id for e in current}
            restored = [e for e in items if e.id not in present]
            self.repository.save_equipment([*current, *restored])
        logger.info(f"Restored equipment {[e.id for e in restored]}")
