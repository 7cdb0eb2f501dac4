from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import List

from .models import default_actor

logger = logging.getLogger(__name__)

BACKENDS = {"file", "sqlite"}


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PERSISTENCE_BACKEND: 'file' (default, JSON cache) or 'sqlite'
    - STORE_DIR: directory holding the store. Default './data'
    - STORE_NAME: store file name. Default 'TodoLists' ('.json'/'.db' appended by the backend)
    - AUTOSAVE: 'true' (default) to save after every mutating request
    - ACTOR_NAME: recorded as lastUpdatedBy on changes. Default: host name
    - LOG_LEVEL: logging level name. Default 'INFO'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    """

    persistence_backend: str
    store_dir: str
    store_name: str
    autosave: bool
    actor_name: str
    log_level: str
    cors_allow_origins: List[str]


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_bool(value: str, default: bool = False) -> bool:
    v = value.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_origins(origins_value: str) -> List[str]:
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "file").strip().lower()
    if backend not in BACKENDS:
        logger.warning("Unsupported PERSISTENCE_BACKEND %r, using 'file'", backend)
        backend = "file"

    return Settings(
        persistence_backend=backend,
        store_dir=_get_env("STORE_DIR", "./data").strip(),
        store_name=_get_env("STORE_NAME", "TodoLists").strip(),
        autosave=_parse_bool(_get_env("AUTOSAVE", "true"), True),
        actor_name=_get_env("ACTOR_NAME", default_actor()).strip(),
        log_level=_get_env("LOG_LEVEL", "INFO").strip().upper(),
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
    )
