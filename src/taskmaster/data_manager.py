from __future__ import annotations

import logging
from pathlib import Path
from threading import RLock
from typing import Generic, List, Optional

from .context import T
from .db import SqliteUnitOfWork
from .file_cache import FileCacheUnitOfWork
from .models import TodoList
from .settings import Settings
from .unit_of_work import StoreState, UnitOfWork

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class DataManager(Generic[T]):
    """
    Application-facing entry point over a UnitOfWork.

    Every call runs under one re-entrant lock so the manager can be shared
    between request threads; the unit of work underneath is unguarded.
    """

    def __init__(self, unit_of_work: UnitOfWork[T]) -> None:
        self._uow = unit_of_work
        self._lock = RLock()

    @property
    def backend(self) -> str:
        return self._uow.backend_name

    @property
    def state(self) -> StoreState:
        return self._uow.state

    @property
    def lock(self) -> RLock:
        """Hold this to make a read-modify-write sequence atomic."""
        return self._lock

    def configure(self, name: str, connection_url: str) -> Path:
        with self._lock:
            return self._uow.configure(name, connection_url)

    def load(self) -> List[T]:
        with self._lock:
            return self._uow.load()

    def save(self) -> None:
        with self._lock:
            self._uow.save()

    def get(self, entity_id: str) -> Optional[T]:
        with self._lock:
            return self._uow.get(entity_id)

    def get_all(self) -> List[T]:
        with self._lock:
            return self._uow.get_all()

    def insert(self, entity: T) -> Optional[T]:
        with self._lock:
            existing = self._uow.insert(entity)
            logger.debug("insert %s: %s", entity.id, "exists" if existing is not None else "added")
            return existing

    def update(self, entity: T) -> Optional[T]:
        with self._lock:
            previous = self._uow.update(entity)
            logger.debug("update %s: %s", entity.id, "replaced" if previous is not None else "not found")
            return previous

    def upsert(self, entity: T) -> Optional[T]:
        with self._lock:
            previous = self._uow.upsert(entity)
            logger.debug("upsert %s: %s", entity.id, "replaced" if previous is not None else "added")
            return previous

    def delete(self, entity_id: str) -> Optional[T]:
        with self._lock:
            removed = self._uow.delete(entity_id)
            logger.debug("delete %s: %s", entity_id, "removed" if removed is not None else "not found")
            return removed


# PUBLIC_INTERFACE
def create_data_manager(settings: Settings) -> DataManager[TodoList]:
    """
    Build the TodoList data manager for the configured backend, then
    configure and load it.
    - file: FileCacheUnitOfWork (JSON document)
    - sqlite: SqliteUnitOfWork
    """
    uow: UnitOfWork[TodoList]
    if settings.persistence_backend == "sqlite":
        uow = SqliteUnitOfWork()
    else:
        uow = FileCacheUnitOfWork(TodoList)
    manager = DataManager(uow)
    manager.configure(settings.store_name, settings.store_dir)
    manager.load()
    return manager
