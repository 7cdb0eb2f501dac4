from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .data_manager import DataManager
from .dependencies import get_data_manager
from .errors import NotConfiguredError, StorageError, StoreError
from .logging_config import configure_logging
from .models import TodoList
from .routers import items as items_router
from .routers import lists as lists_router
from .routers import store as store_router
from .settings import get_settings

openapi_tags = [
    {"name": "health", "description": "Service health and store status."},
    {"name": "lists", "description": "CRUD operations for todo lists."},
    {"name": "items", "description": "CRUD operations for the items of a todo list."},
    {"name": "store", "description": "Explicit load/save of the persisted store."},
]

_settings = get_settings()
configure_logging(_settings.log_level)

app = FastAPI(
    title="Taskmaster",
    description="Todo lists backed by a JSON file cache or a local SQLite database.",
    version="0.1.0",
    openapi_tags=openapi_tags,
)

# Configure CORS based on settings (CORS_ALLOW_ORIGINS), with '*' fallback
allow_all = (_settings.cors_allow_origins == ["*"]) or (len(_settings.cors_allow_origins) == 0)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all else _settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, message: str, detail) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "detail": detail},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return a consistent JSON structure for request validation errors.

    Response format:
        {
            "error": "ValidationError",
            "detail": [... pydantic/fastapi error details ...],
            "message": "Request validation failed"
        }
    """
    return _error(422, "ValidationError", "Request validation failed", exc.errors())


@app.exception_handler(StoreError)
async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    """
    Map store failures to JSON: storage I/O errors are 503, lifecycle
    misuse (not configured / not loaded) is 409.
    """
    if isinstance(exc, StorageError):
        cause = exc.__cause__
        return _error(503, "StorageError", str(exc), str(cause) if cause is not None else None)
    if isinstance(exc, NotConfiguredError):
        return _error(409, "NotConfiguredError", str(exc), None)
    return _error(500, type(exc).__name__, str(exc), None)


# PUBLIC_INTERFACE
@app.get("/", summary="Health Check", tags=["health"])
def health_check(manager: DataManager[TodoList] = Depends(get_data_manager)):
    """
    Health check endpoint.

    Returns:
        A JSON object with the active backend and the store state.
    """
    return {"message": "Healthy", "backend": manager.backend, "state": manager.state.value}


app.include_router(lists_router.router)
app.include_router(items_router.router)
app.include_router(store_router.router)
