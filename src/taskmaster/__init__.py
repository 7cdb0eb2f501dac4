"""
Taskmaster todo store.

Generic repository and unit-of-work layer over an in-memory context, with
a JSON file cache backend and a SQLite backend. The FastAPI app lives in
taskmaster.main and is not imported here.
"""

from .context import Context
from .data_manager import DataManager, create_data_manager
from .db import SqliteUnitOfWork
from .errors import NotConfiguredError, StorageError, StoreError
from .file_cache import FileCacheUnitOfWork
from .models import Importance, TodoItem, TodoList
from .repositories import ContextRepository, Repository
from .unit_of_work import StoreState, UnitOfWork

__all__ = [
    "Context",
    "ContextRepository",
    "DataManager",
    "FileCacheUnitOfWork",
    "Importance",
    "NotConfiguredError",
    "Repository",
    "SqliteUnitOfWork",
    "StorageError",
    "StoreError",
    "StoreState",
    "TodoItem",
    "TodoList",
    "UnitOfWork",
    "create_data_manager",
]
