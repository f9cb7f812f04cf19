"""Durable key-value storage backends."""

import logging
from datetime import datetime
from typing import Dict, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from ..interfaces.storage import IKeyValueStorage
from .database import DatabaseManager
from .exceptions import StorageError
from .models import KeyValueEntryModel


logger = logging.getLogger(__name__)


class SqlKeyValueStorage(IKeyValueStorage):
    """
    Key-value storage on a SQL database.

    Each key is one row of the ``kv_entries`` table. Database errors
    and filesystem errors are reported as StorageError.
    """

    def __init__(
        self,
        db_manager: Optional[DatabaseManager] = None,
        database_url: Optional[str] = None,
    ):
        """
        Initialize the storage.

        Args:
            db_manager: Optional DatabaseManager instance. If not provided,
                       a new one will be created.
            database_url: Database URL for creating a new DatabaseManager.
        """
        if db_manager is not None:
            self._db_manager = db_manager
            self._owns_db_manager = False
        else:
            self._db_manager = DatabaseManager(database_url=database_url)
            self._owns_db_manager = True
        self._initialized = False

    @property
    def db_manager(self) -> DatabaseManager:
        return self._db_manager

    def _ensure_schema(self) -> None:
        if not self._initialized:
            self._db_manager.init_database()
            self._initialized = True

    def get(self, key: str) -> Optional[str]:
        try:
            self._ensure_schema()
            with self._db_manager.get_session() as session:
                return session.execute(
                    select(KeyValueEntryModel.value).where(KeyValueEntryModel.key == key)
                ).scalar()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message=f"Failed to read key: {e}",
                key=key,
                operation="get",
                details={"original_error": str(e)},
            ) from e

    def set(self, key: str, value: str) -> None:
        try:
            self._ensure_schema()
            with self._db_manager.get_session() as session:
                entry = session.get(KeyValueEntryModel, key)
                if entry is None:
                    session.add(KeyValueEntryModel(key=key, value=value))
                else:
                    entry.value = value
                    entry.updated_at = datetime.utcnow()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message=f"Failed to write key: {e}",
                key=key,
                operation="set",
                details={"original_error": str(e)},
            ) from e

    def delete(self, key: str) -> None:
        try:
            self._ensure_schema()
            with self._db_manager.get_session() as session:
                session.execute(delete(KeyValueEntryModel).where(KeyValueEntryModel.key == key))
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(
                message=f"Failed to delete key: {e}",
                key=key,
                operation="delete",
                details={"original_error": str(e)},
            ) from e

    def close(self) -> None:
        """Release the database connection if this storage created it."""
        if self._owns_db_manager:
            self._db_manager.close()


class InMemoryKeyValueStorage(IKeyValueStorage):
    """Process-local storage, used for tests and ephemeral runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        """Copy of everything stored."""
        return dict(self._data)
