"""
Service wiring for KitCheckout.

Provides a container that lazily builds the store, repository and
services from AppSettings, plus the start-up initialization step.
"""

from typing import Optional

from loguru import logger

from kitcheckout.config import AppSettings, get_app_settings


class ServiceContainer:
    """
    Container for lazy-loaded service instances.

    All services share one repository, so they see the same documents.
    """

    def __init__(self, settings: Optional[AppSettings] = None, clock=None):
        self.settings = settings or get_app_settings()
        self.clock = clock
        self._store = None
        self._repository = None
        self._identity = None
        self._ledger = None
        self._catalog = None
        self._inventory = None
        self._undo_registry = None
        self._reports = None

    @property
    def store(self):
        """Get document store instance."""
        if self._store is None:
            from .storage.document_store import DocumentStore
            self._store = DocumentStore(
                database_url=self.settings.database_url,
                echo=self.settings.database_echo,
            )
        return self._store

    @property
    def repository(self):
        """Get collection repository instance."""
        if self._repository is None:
            from .storage.repository import CheckoutRepository
            self._repository = CheckoutRepository(
                self.store,
                key_prefix=self.settings.storage_key_prefix,
            )
        return self._repository

    @property
    def identity(self):
        """Get identity service instance."""
        if self._identity is None:
            from .identity.service import IdentityService
            self._identity = IdentityService(
                self.repository,
                admin_code=self.settings.admin_code,
                clock=self.clock,
            )
        return self._identity

    @property
    def ledger(self):
        """Get ledger engine instance."""
        if self._ledger is None:
            from .ledger.engine import LedgerEngine
            self._ledger = LedgerEngine(self.repository, clock=self.clock)
        return self._ledger

    @property
    def catalog(self):
        """Get settings/category manager instance."""
        if self._catalog is None:
            from .catalog.manager import CatalogManager
            self._catalog = CatalogManager(self.repository, clock=self.clock)
        return self._catalog

    @property
    def undo_registry(self):
        """Get undo registry instance."""
        if self._undo_registry is None:
            from .ledger.undo import UndoRegistry
            self._undo_registry = UndoRegistry()
        return self._undo_registry

    @property
    def inventory(self):
        """Get inventory manager instance."""
        if self._inventory is None:
            from .ledger.inventory import InventoryManager
            self._inventory = InventoryManager(
                self.repository,
                undo_registry=self.undo_registry,
                undo_window_seconds=self.settings.undo_window_seconds,
                clock=self.clock,
            )
        return self._inventory

    @property
    def reports(self):
        """Get ledger reports instance."""
        if self._reports is None:
            from .ledger.reports import LedgerReports
            self._reports = LedgerReports(self.repository)
        return self._reports

    def ensure_init(self) -> int:
        """
        Start-up initialization.

        Saves default settings on first run and migrates legacy users.

        Returns:
            Number of migrated user records
        """
        self.repository.ensure_default_settings()
        migrated = self.identity.migrate_legacy_users()
        logger.info(f"Storage ready ({migrated} legacy users migrated)")
        return migrated
