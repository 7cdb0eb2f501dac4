"""
JSON file cache backend.

The whole context lives in one JSON document, an array of entities
serialized with camelCase keys:

    <connection_url>/<name>.json

Reads load the full file; writes replace it atomically (temp file + rename).
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Type

from pydantic import TypeAdapter, ValidationError

from .context import Context, T
from .errors import StorageError
from .unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class FileCacheUnitOfWork(UnitOfWork[T]):
    """Unit of work persisting a context of `entity_type` records to a JSON file."""

    backend_name = "file"

    def __init__(self, entity_type: Type[T], context: Optional[Context[T]] = None) -> None:
        super().__init__(context)
        self._adapter = TypeAdapter(List[entity_type])  # type: ignore[valid-type]

    def _resolve_location(self, name: str, connection_url: str) -> Path:
        filename = name if name.endswith(".json") else f"{name}.json"
        return Path(connection_url) / filename

    def _prepare(self, location: Path) -> None:
        try:
            location.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error("Cannot create cache directory %s: %s", location.parent, e)
            raise StorageError(f"cannot create cache directory {location.parent}") from e

    def _read(self) -> List[T]:
        assert self.location is not None
        if not self.location.exists():
            return []
        try:
            with open(self.location, encoding="utf-8") as f:
                data = json.load(f)
            return self._adapter.validate_python(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error("Cannot read cache file %s: %s", self.location, e)
            raise StorageError(f"cannot read cache file {self.location}") from e

    def _write(self, entities: List[T]) -> None:
        assert self.location is not None
        data = self._adapter.dump_python(entities, mode="json", by_alias=True)
        temp = self.location.with_suffix(self.location.suffix + ".tmp")
        try:
            with open(temp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp.replace(self.location)
        except OSError as e:
            temp.unlink(missing_ok=True)
            logger.error("Cannot write cache file %s: %s", self.location, e)
            raise StorageError(f"cannot write cache file {self.location}") from e
