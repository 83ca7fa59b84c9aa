"""
Document Store for KitCheckout

Key-value storage of JSON documents on top of SQLAlchemy:
- SQLite file or in-memory database by default
- Any SQLAlchemy URL for other backends
- One row per collection key

Design Decisions:
1. Whole-document writes: each collection is replaced as a unit
2. Read resilience: undecodable text falls back to the caller's default
3. No cross-key transactions: callers own multi-document sequencing
4. One lock per store: sessions never overlap on the shared connection
"""

import json
import threading
from pathlib import Path
from typing import Any, Optional

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from kitcheckout.errors import StorageReadError, StorageUnavailableError, StorageWriteError
from kitcheckout.utils import utcnow
from .models import Base, DocumentModel


class DocumentStore:
    """
    Durable key-value store of JSON documents.

    Usage:
        store = DocumentStore(sqlite_path=Path("./kitcheckout.db"))

        store.write("sports_equipment", [{"id": 1, "name": "Ball"}])
        items = store.read("sports_equipment", default=[])
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        sqlite_path: Optional[Path] = None,
        echo: bool = False,
    ):
        """
        Initialize store.

        Args:
            database_url: SQLAlchemy database URL
            sqlite_path: Path for SQLite database
            echo: Log emitted SQL
        """
        if database_url:
            self.database_url = database_url
        elif sqlite_path:
            self.database_url = f"sqlite:///{sqlite_path}"
        else:
            self.database_url = "sqlite:///:memory:"

        engine_kwargs = {}
        if self.database_url.startswith("sqlite") and ":memory:" in self.database_url:
            # One shared connection so every session sees the same in-memory database
            engine_kwargs = {
                "connect_args": {"check_same_thread": False},
                "poolclass": StaticPool,
            }

        self.engine = create_engine(self.database_url, echo=echo, **engine_kwargs)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)
        self._lock = threading.RLock()

        logger.info(f"DocumentStore initialized: {self.database_url[:50]}...")

    def get_session(self) -> Session:
        """Get database session."""
        return self.SessionLocal()

    def exists(self, key: str) -> bool:
        """Check whether a document is stored under ``key``."""
        return self.read_text(key) is not None

    def read_text(self, key: str) -> Optional[str]:
        """
        Raw stored text for ``key``, or None.

        Raises:
            StorageUnavailableError: If the database query fails
        """
        try:
            with self._lock, self.get_session() as session:
                row = session.get(DocumentModel, key)
                return row.value if row else None
        except SQLAlchemyError as e:
            logger.error(f"Error reading {key} from storage: {e}")
            raise StorageUnavailableError(key, str(e)) from e

    def read(self, key: str, default: Any = None) -> Any:
        """
        Read and decode a document.

        Args:
            key: Collection key
            default: Returned when nothing is stored or the text is corrupt

        Returns:
            Decoded document or ``default``
        """
        raw = self.read_text(key)
        if raw is None:
            return default

        try:
            return self.decode(key, raw)
        except StorageReadError as e:
            logger.warning(f"{e.message}; using default ({e.detail})")
            return default

    @staticmethod
    def decode(key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            raise StorageReadError(key, str(e)) from e

    def write(self, key: str, document: Any) -> None:
        """
        Encode and persist a document, replacing any previous value.

        Raises:
            StorageWriteError: If encoding or the database write fails
        """
        try:
            raw = json.dumps(document, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error(f"Error encoding {key}: {e}")
            raise StorageWriteError(key, str(e)) from e

        self.write_text(key, raw)

    def write_text(self, key: str, raw: str) -> None:
        """Persist raw text under ``key``."""
        try:
            with self._lock, self.get_session() as session:
                session.merge(DocumentModel(key=key, value=raw, updated_at=utcnow()))
                session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error writing {key} to storage: {e}")
            raise StorageWriteError(key, str(e)) from e

    def delete(self, key: str) -> bool:
        """
        Remove a document.

        Returns:
            True if a document was removed

        Raises:
            StorageWriteError: If the database write fails
        """
        try:
            with self._lock, self.get_session() as session:
                row = session.get(DocumentModel, key)
                if not row:
                    return False
                session.delete(row)
                session.commit()
                return True
        except SQLAlchemyError as e:
            logger.error(f"Error deleting {key} from storage: {e}")
            raise StorageWriteError(key, str(e)) from e
