"""
HTTP gateway over the object store.

Every route is a thin pass-through to one StorageInterface call. The store
handle is injected through `create_app` and shared read-only by all
requests; failures are mapped to JSON by `error_response` and never stop
the server.
"""
import asyncio
import logging
import os
import time
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from core.base_class.base_connectors import ObjectStream
from core.base_class.observer import MetricsObserver
from core.errors import ClientInputError, GatewayError, StoreError
from interface.storage import StorageInterface
from models.http_model import (
    HealthResponse,
    ListResponse,
    MessageResponse,
    StatusMessageResponse,
    StatusResponse,
)
from services.responses import error_response, install_error_handlers
from utils.content_types import get_mimetype_for_extension, get_mimetype_for_file, resolve_extension
from utils.naming import generate_random_filename

router = APIRouter()


def get_storage(request: Request) -> StorageInterface:
    return request.app.state.storage


def get_logger(request: Request) -> logging.Logger:
    return request.app.state.logger


@router.get("/", response_model=MessageResponse)
async def index():
    return {"message": "Hello, Gin!"}


@router.get("/isexist/{name}", response_model=MessageResponse)
async def is_exist(
    name: str,
    storage: StorageInterface = Depends(get_storage),
):
    try:
        exists = await storage.exists(name)
    except StoreError as e:
        return error_response(e, "Error checking object: {detail}")
    except GatewayError as e:
        return error_response(e, "Error: {detail}")

    if exists:
        return {"message": f"Object '{name}' exists"}
    return {"message": f"Object '{name}' does not exist"}


async def _stream_body(
    stream: ObjectStream,
    filename: str,
    logger: logging.Logger,
) -> AsyncIterator[bytes]:
    # Headers are already sent once this runs; a failure can only abort the body
    try:
        async for chunk in stream.iter_chunks():
            yield chunk
        logger.info(f"File downloaded successfully: {filename}")
    except GatewayError as e:
        logger.error(f"Failed to send file to client: {e}")
        raise
    finally:
        await stream.close()


@router.get("/download/{object_name}")
async def download(
    object_name: str,
    storage: StorageInterface = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    ext = resolve_extension(object_name)

    try:
        info = await storage.stat(object_name)
    except GatewayError as e:
        logger.error(f"Failed to get object metadata: {e}")
        return error_response(e, "Failed to get object metadata")

    try:
        stream = await storage.open(object_name)
    except GatewayError as e:
        logger.error(f"Failed to get object: {e}")
        return error_response(e, "Failed to get object")

    filename = generate_random_filename(ext)
    return StreamingResponse(
        _stream_body(stream, filename, logger),
        media_type=get_mimetype_for_extension(ext),
        headers={
            "Content-Disposition": f"attachment; filename={filename}",
            "Content-Length": str(info.size),
        },
        background=BackgroundTask(stream.close),
    )


def _upload_length(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    length = upload.file.tell()
    upload.file.seek(0)
    return length


@router.post("/upload", response_model=MessageResponse)
async def upload(
    request: Request,
    storage: StorageInterface = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    try:
        form = await request.form()
    except (MultiPartException, HTTPException, ValueError) as e:
        logger.error(f"Failed to get file from form: {e}")
        return error_response(ClientInputError(str(e)), "Failed to get file")

    try:
        file = form.get("file")
        if not isinstance(file, UploadFile) or not file.filename:
            logger.error("Failed to get file from form: field 'file' is missing")
            return error_response(ClientInputError("missing file field"), "Failed to get file")

        object_name = file.filename
        try:
            length = _upload_length(file)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to open file: {e}")
            return error_response(ClientInputError(str(e)), "Failed to open file")

        try:
            await storage.upload(
                object_name,
                file.file,
                length,
                content_type=file.content_type or get_mimetype_for_file(object_name),
            )
        except GatewayError as e:
            logger.error(f"Failed to upload {object_name}: {e}")
            return error_response(e, "Failed to upload file to OSS")
    finally:
        await form.close()

    logger.info(f"File uploaded successfully: {object_name}")
    return {"message": "File uploaded successfully"}


@router.delete("/delete/{object_name}", response_model=StatusMessageResponse)
async def delete(
    object_name: str,
    storage: StorageInterface = Depends(get_storage),
):
    try:
        await storage.delete(object_name)
    except GatewayError as e:
        return error_response(e, "Failed to delete object: {error}", with_status=True)

    return {
        "status": "success",
        "message": f"Object '{object_name}' deleted successfully",
    }


@router.get("/list", response_model=ListResponse)
async def list_objects(
    request: Request,
    storage: StorageInterface = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    try:
        objects = await storage.list_all(request.app.state.list_page_size)
    except GatewayError as e:
        logger.error(f"Failed to list objects: {e}")
        return error_response(e, "Failed to list objects: {error}", with_status=True)

    logger.info(f"All objects have been listed ({len(objects)} keys)")
    return {
        "status": "success",
        "message": "All objects have been listed",
        "objects": objects,
    }


@router.get("/invertcode/{audio}")
async def invert_code(
    audio: str,
    storage: StorageInterface = Depends(get_storage),
    logger: logging.Logger = Depends(get_logger),
):
    try:
        stream = await storage.open(audio)
    except GatewayError as e:
        logger.error(f"Error getting object: {e}")
        return error_response(e, "Failed to get object", with_status=True)
    await stream.close()

    # TODO: wire an audio transcoder here; until then the endpoint only verifies the object
    return JSONResponse(
        status_code=501,
        content={
            "status": "error",
            "message": "invertcode is not implemented",
            "file": audio,
        },
    )


@router.get("/health", response_model=HealthResponse)
async def health(request: Request, storage: StorageInterface = Depends(get_storage)):
    uptime = round(time.monotonic() - request.app.state.started_at, 2)
    status = "ok" if await storage.health_check() else "degraded"
    return HealthResponse(status=status, uptime_seconds=uptime)


@router.get("/status", response_model=StatusResponse)
async def status(request: Request, storage: StorageInterface = Depends(get_storage)):
    metrics: Optional[MetricsObserver] = request.app.state.metrics
    details = {
        "backend": storage.worker.name,
        "healthy": storage.is_healthy(),
    }
    if metrics is not None:
        details["operations"] = metrics.get_metrics()
    return StatusResponse(
        current_operation="running",
        active_tasks=len(asyncio.all_tasks()),
        details=details,
    )


def create_app(
    storage: StorageInterface,
    *,
    logger: Optional[logging.Logger] = None,
    metrics: Optional[MetricsObserver] = None,
    list_page_size: Optional[int] = None,
) -> FastAPI:
    """
    Build the gateway application around an explicitly owned store handle.

    Args:
        storage: Initialized storage interface shared by all requests
        logger: Logger for request-level messages
        metrics: Metrics observer exposed through /status
        list_page_size: Keys requested per listing page (connector default if None)
    """
    app = FastAPI(title="objgate", version="1.0.0")
    app.state.storage = storage
    app.state.logger = logger or logging.getLogger("objgate")
    app.state.metrics = metrics
    app.state.list_page_size = list_page_size
    app.state.started_at = time.monotonic()
    install_error_handlers(app)
    app.include_router(router)
    return app
