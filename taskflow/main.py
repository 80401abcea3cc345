"""taskflow - task and category stores served over HTTP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from taskflow.core.config import Settings, constants, settings
from taskflow.core.kv_store import KeyValueStore
from taskflow.core.logging import configure_logfire, instrument_fastapi
from taskflow.core.record_client import RecordClient
from taskflow.interface.api_router import router as api_router
from taskflow.services.board_service import BoardService
from taskflow.services.category_store import CategoryStore
from taskflow.services.task_store import TaskStore
from taskflow.storage.factory import build_backends


logger = logging.getLogger(__name__)


async def check_pocketbase_connectivity(url: str) -> None:
    """Verify the PocketBase server answers its health endpoint.

    Raises:
        ConnectionError: If unable to reach PocketBase
    """
    try:
        async with httpx.AsyncClient(timeout=constants.API_TIMEOUT_SECONDS) as client:
            response = await client.get(f"{url.rstrip('/')}/api/health")
    except httpx.HTTPError as e:
        logger.error("startup_validation", extra={"service": "pocketbase", "status": "failed", "error": str(e)})
        raise ConnectionError(f"PocketBase connectivity check failed: {e}") from e

    if not response.is_success:
        logger.error("startup_validation", extra={"service": "pocketbase", "status": response.status_code})
        raise ConnectionError(f"PocketBase returned status {response.status_code}")
    logger.info("startup_validation", extra={"service": "pocketbase", "status": "ok"})


def build_board(
    app_settings: Settings,
    *,
    kv: KeyValueStore | None = None,
    client: RecordClient | None = None,
) -> BoardService:
    """Construct both stores for the configured backend and wrap them in a board service."""
    task_backend, category_backend = build_backends(app_settings, kv=kv, client=client)
    return BoardService(TaskStore(task_backend), CategoryStore(category_backend))


def create_app(
    app_settings: Settings | None = None,
    *,
    kv: KeyValueStore | None = None,
    client: RecordClient | None = None,
    observability: bool = True,
) -> FastAPI:
    """Create the FastAPI application.

    Stores are constructed once in the lifespan and shared through app.state.
    """
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if observability:
            configure_logfire(app_settings)

        if app_settings.backend == "remote" and client is None:
            await check_pocketbase_connectivity(app_settings.pocketbase_url)

        local_kv = kv
        if app_settings.backend == "local" and local_kv is None:
            local_kv = KeyValueStore(app_settings.local_db_path)

        app.state.board = build_board(app_settings, kv=local_kv, client=client)
        logger.info("Stores initialized", extra={"backend": app_settings.backend})
        yield
        if local_kv is not None:
            await local_kv.close()

    app = FastAPI(
        title="taskflow",
        description="Task list with categories, backed by local storage or PocketBase",
        version="0.1.0",
        lifespan=lifespan,
    )

    if observability:
        instrument_fastapi(app)

    app.include_router(api_router)

    @app.get("/health")
    async def health_check() -> JSONResponse:
        """Health check endpoint."""
        return JSONResponse(content={"status": "healthy", "backend": app_settings.backend}, status_code=200)

    return app


app = create_app()
