from __future__ import annotations

from functools import lru_cache

from .data_manager import DataManager, create_data_manager
from .models import TodoList
from .settings import Settings, get_settings


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_data_manager() -> DataManager[TodoList]:
    """
    Process-wide TodoList data manager, configured and loaded on first use
    from the current settings.
    """
    return create_data_manager(get_settings())


# PUBLIC_INTERFACE
def get_app_settings() -> Settings:
    """Dependency wrapper so tests can override settings per request."""
    return get_settings()


def commit(manager: DataManager[TodoList], settings: Settings) -> None:
    """Flush the working set after a mutating request when autosave is on."""
    if settings.autosave:
        manager.save()
