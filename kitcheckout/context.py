"""
Presentation-facing application context.

The context is passed explicitly to whatever renders the app. It holds
the signed-in user, the service container, a notification callback and
a confirmation prompt, and turns every outcome into a Notification.
Domain errors become error notifications; anything else propagates.
"""

from typing import Callable, Iterable, Optional, TypeVar

from loguru import logger

from kitcheckout.catalog.theme import theme_palette
from kitcheckout.errors import CheckoutError, PermissionDeniedError, AuthenticationError
from kitcheckout.ledger.undo import UndoAction
from kitcheckout.notifications import Notification, NotificationKind, Notifier
from kitcheckout.services import ServiceContainer
from kitcheckout.storage.records import Category, Equipment, Log, Role, Settings, User

T = TypeVar("T")


class AppContext:
    """
    Session state plus the user-facing flows.

    Usage:
        center = NotificationCenter()
        ctx = AppContext(services, notify=center, confirm=lambda message: True)

        ctx.login("a@school.edu", "goalie123")
        ctx.borrow(equipment_id=1, quantity=2, photo=photo)
        center.latest.message   # "Ball borrowed successfully."
    """

    def __init__(
        self,
        services: ServiceContainer,
        notify: Notifier,
        confirm: Callable[[str], bool],
    ):
        self.services = services
        self.notify = notify
        self.confirm = confirm
        self.current_user: Optional[User] = None
        self.view = "auth"
        self._restore_messages: dict[str, str] = {}

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _success(self, title: str, message: str, undo_action: Optional[UndoAction] = None) -> None:
        self.notify(Notification(title, message, NotificationKind.SUCCESS, undo_action))

    def _error(self, title: str, message: str) -> None:
        self.notify(Notification(title, message, NotificationKind.ERROR))

    def _attempt(self, failure_title: str, operation: Callable[[], T]) -> Optional[T]:
        try:
            return operation()
        except CheckoutError as e:
            logger.info(f"{failure_title}: {e.code} - {e.message}")
            self._error(failure_title, e.message)
            return None

    def _require_user(self) -> User:
        if self.current_user is None:
            raise AuthenticationError("Please log in first.", code="NOT_AUTHENTICATED")
        return self.current_user

    def _require_admin(self) -> User:
        user = self._require_user()
        if not user.is_admin:
            raise PermissionDeniedError()
        return user

    @property
    def settings(self) -> Settings:
        return self.services.catalog.get_settings()

    @property
    def palette(self) -> dict[str, str]:
        return theme_palette(self.settings)

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    def signup(
        self,
        email: str,
        password: str,
        is_admin: bool = False,
        admin_code: Optional[str] = None,
    ) -> Optional[User]:
        role = Role.ADMIN if is_admin else Role.STUDENT
        user = self._attempt(
            "Validation Error",
            lambda: self.services.identity.register(email, password, role, admin_code),
        )
        if user:
            self._success("Account Created", "You can now log in with your new account.")
        return user

    def login(self, email: str, password: str) -> Optional[User]:
        user = self._attempt("Login Failed", lambda: self.services.identity.authenticate(email, password))
        if user:
            self.current_user = user
            self.view = "student"
            self._success("Login Successful", f"Welcome {'Admin' if user.is_admin else 'Student'}")
        return user

    def logout(self) -> None:
        self.current_user = None
        self.view = "auth"
        self.notify(Notification("Logged Out", "You have been successfully logged out.", NotificationKind.INFO))

    def switch_to_admin(self) -> bool:
        if self._attempt("Permission Denied", self._require_admin) is None:
            return False
        self.view = "admin"
        return True

    def switch_to_student(self) -> None:
        self.view = "student"

    # -------------------------------------------------------------------------
    # Borrowing
    # -------------------------------------------------------------------------

    def is_borrowing(self, equipment_id: int) -> bool:
        if self.current_user is None:
            return False
        return self.services.ledger.is_already_borrowing(self.current_user.email, equipment_id)

    def borrow(self, equipment_id: int, quantity: int, photo: str) -> Optional[Log]:
        if self.is_borrowing(equipment_id):
            self._error(
                "Already Borrowing",
                "You are already borrowing this item. Please return it first before borrowing another one.",
            )
            return None
        if not photo:
            self._error("Photo Required", "Please take a photo as proof.")
            return None

        def run() -> Log:
            user = self._require_user()
            return self.services.ledger.borrow(user.email, equipment_id, quantity, photo)

        log = self._attempt("Cannot Borrow", run)
        if log:
            self._success("Success", f"{log.name} borrowed successfully.")
        return log

    def return_item(self, equipment_id: int, photo: str) -> Optional[Log]:
        if not photo:
            self._error("Photo Required", "Please take a photo as proof.")
            return None

        def run() -> Log:
            user = self._require_user()
            return self.services.ledger.return_equipment(user.email, equipment_id, photo)

        log = self._attempt("Cannot Return", run)
        if log:
            self._success("Success", f"{log.name} returned successfully.")
        return log

    def my_history(self) -> list[Log]:
        if self.current_user is None:
            return []
        return self.services.reports.user_history(self.current_user.email)

    # -------------------------------------------------------------------------
    # Admin: equipment
    # -------------------------------------------------------------------------

    def save_equipment(self, item: Equipment) -> Optional[Equipment]:
        is_edit = bool(item.id)

        def run() -> Equipment:
            self._require_admin()
            return self.services.inventory.save(item)

        saved = self._attempt("Error", run)
        if saved:
            self._success("Success", f"Equipment {'updated' if is_edit else 'added'}.")
        return saved

    def delete_equipment(self, equipment_id: int) -> Optional[UndoAction]:
        def run() -> Optional[UndoAction]:
            self._require_admin()
            return self.services.inventory.delete(equipment_id, self.confirm)

        action = self._attempt("Error", run)
        if action:
            self._restore_messages[action.id] = "Item has been restored."
            self.notify(Notification("Deleted", "Item deleted.", NotificationKind.ERROR, action))
        return action

    def bulk_delete_equipment(self, equipment_ids: Iterable[int]) -> Optional[UndoAction]:
        ids = list(equipment_ids)

        def run() -> Optional[UndoAction]:
            self._require_admin()
            return self.services.inventory.bulk_delete(ids, self.confirm)

        action = self._attempt("Error", run)
        if action:
            self._restore_messages[action.id] = "Items have been restored."
            self.notify(Notification("Bulk Deleted", f"{len(ids)} items deleted.", NotificationKind.ERROR, action))
        return action

    def undo(self, action: UndoAction) -> bool:
        try:
            action.undo()
        except CheckoutError as e:
            self._restore_messages.pop(action.id, None)
            self._error("Cannot Undo", e.message)
            return False
        self._success("Restored", self._restore_messages.pop(action.id, "Change has been undone."))
        return True

    # -------------------------------------------------------------------------
    # Admin: settings and categories
    # -------------------------------------------------------------------------

    def update_settings(self, settings: Settings) -> Optional[Settings]:
        def run() -> Settings:
            self._require_admin()
            return self.services.catalog.update_settings(settings)

        return self._attempt("Error", run)

    def set_icon_logo(self, icon: str) -> Optional[Settings]:
        def run() -> Settings:
            self._require_admin()
            return self.services.catalog.set_icon_logo(icon)

        updated = self._attempt("Error", run)
        if updated:
            self._success("Logo updated", "Icon logo has been set.")
        return updated

    def set_image_logo(self, data_url: str) -> Optional[Settings]:
        def run() -> Settings:
            self._require_admin()
            return self.services.catalog.set_image_logo(data_url)

        updated = self._attempt("Error", run)
        if updated:
            self._success("Logo updated", "Image logo has been set.")
        return updated

    def reset_colors(self) -> Optional[Settings]:
        def run() -> Settings:
            self._require_admin()
            return self.services.catalog.reset_colors()

        updated = self._attempt("Error", run)
        if updated:
            self.notify(Notification("Colors Reset", "Theme colors have been reset to default.", NotificationKind.INFO))
        return updated

    def add_category(self, name: str, default_image: Optional[str] = None) -> Optional[Category]:
        def run() -> Category:
            self._require_admin()
            return self.services.catalog.add_category(name, default_image)

        category = self._attempt("Error", run)
        if category:
            self._success("Success", "New category added.")
        return category

    def delete_category(self, category_id: int) -> bool:
        def run() -> bool:
            self._require_admin()
            return self.services.catalog.delete_category(category_id, self.confirm)

        deleted = self._attempt("Cannot Delete", run)
        if deleted:
            self._success("Success", "Category deleted.")
        return bool(deleted)
