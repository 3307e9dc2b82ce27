"""
Error-to-response mapping shared by every gateway handler.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from core.errors import GatewayError

logger = logging.getLogger("objgate")


def error_response(exc: GatewayError, message: str, *, with_status: bool = False) -> JSONResponse:
    """
    Build the JSON error body for a failed store operation.

    `message` may reference `{detail}` (the store's message or raw transport
    error) and `{error}` (the full error string, store code included).
    ClientInputError maps to 400, every other gateway error to 500.
    """
    body = {}
    if with_status:
        body["status"] = "error"
    body["message"] = message.format(detail=exc.detail, error=str(exc))
    return JSONResponse(status_code=exc.http_status, content=body)


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    logger.error(f"Unhandled gateway error on {request.url.path}: {exc}")
    return error_response(exc, "{error}")


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unexpected error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, gateway_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
