"""
changestore.runtime  ──  HTTP façade over a ChangeStore.

Usage pattern in user code
--------------------------
    from changestore.runtime import create_app

    app = create_app(database_url="postgresql+asyncpg://...")

The engine is created in the app lifespan and disposed on shutdown;
the store lives on `app.state.store`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import create_async_engine

from .bootstrap import init_changestore
from .config import get_settings
from .core.record import DocumentChanges
from .errors import (
    ChangeStoreError,
    InvalidArgumentError,
    SerializationError,
    StorageError,
    VersionConflictError,
)
from .persistence.store import ChangeStore

logger = logging.getLogger(__name__)

router = APIRouter()


class ChangeIn(BaseModel):
    change: Any


def get_store(request: Request) -> ChangeStore:
    return request.app.state.store


# ---- routes -------------------------------------------------------------


@router.get("/")
def health() -> Dict[str, str]:
    return {"status": "running"}


@router.get("/documents/{document_id}/version")
async def document_version(
    document_id: str, store: ChangeStore = Depends(get_store)
) -> Dict[str, int]:
    return {"version": await store.get_version(document_id)}


@router.get("/documents/{document_id}/changes", response_model=DocumentChanges)
async def list_changes(
    document_id: str,
    since_version: int = Query(0, ge=0),
    store: ChangeStore = Depends(get_store),
) -> DocumentChanges:
    return await store.get_changes(document_id, since_version)


@router.post("/documents/{document_id}/changes", status_code=status.HTTP_201_CREATED)
async def add_change(
    document_id: str, body: ChangeIn, store: ChangeStore = Depends(get_store)
) -> Dict[str, int]:
    return {"version": await store.add_change(document_id, body.change)}


@router.delete(
    "/documents/{document_id}/changes", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_changes(
    document_id: str, store: ChangeStore = Depends(get_store)
) -> Response:
    await store.remove_changes(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---- error mapping ------------------------------------------------------


def _error_response(status_code: int, exc: ChangeStoreError) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


async def _conflict(request: Request, exc: VersionConflictError) -> JSONResponse:
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def _unavailable(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return _error_response(status.HTTP_503_SERVICE_UNAVAILABLE, exc)


async def _unprocessable(request: Request, exc: SerializationError) -> JSONResponse:
    return _error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, exc)


async def _bad_request(request: Request, exc: InvalidArgumentError) -> JSONResponse:
    return _error_response(status.HTTP_400_BAD_REQUEST, exc)


def create_app(
    database_url: Optional[str] = None,
    *,
    create_schema: Optional[bool] = None,
    **fastapi_kwargs: Any,
) -> FastAPI:
    """
    One-liner for web apps:
        app = create_app(database_url=URL)

    Missing arguments fall back to `get_settings()`.
    """
    settings = get_settings()
    url = database_url or settings.database_url
    schema = settings.create_schema if create_schema is None else create_schema

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        engine = create_async_engine(url, pool_pre_ping=True)
        app.state.store = await init_changestore(engine, create_schema=schema)
        logger.info("Change store ready on %s", engine.url.render_as_string(hide_password=True))
        try:
            yield
        finally:
            await engine.dispose()

    app = FastAPI(lifespan=lifespan, **fastapi_kwargs)
    app.include_router(router)
    app.add_exception_handler(VersionConflictError, _conflict)
    app.add_exception_handler(StorageError, _unavailable)
    app.add_exception_handler(SerializationError, _unprocessable)
    app.add_exception_handler(InvalidArgumentError, _bad_request)
    return app
