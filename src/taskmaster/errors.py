from __future__ import annotations


class StoreError(Exception):
    """Base class for errors raised by the todo store."""


class NotConfiguredError(StoreError):
    """
    Raised when a store operation is called out of lifecycle order:
    load() before configure(), or CRUD/save() before the first load().
    """


class StorageError(StoreError):
    """
    Raised when the backing storage cannot be created, read or written.
    The underlying exception is chained as __cause__.
    """
