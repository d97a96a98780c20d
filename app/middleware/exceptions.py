from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from app.core.exceptions import AppError
from app.schemas.response import ErrorResponse
import logging
import uuid

logger = logging.getLogger(__name__)

def _get_error_code(status_code: int) -> str:
    code_map = {
        400: "BAD_REQUEST",
        401: "UNAUTHORIZED",
        403: "FORBIDDEN",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        409: "CONFLICT",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR",
        501: "NOT_IMPLEMENTED",
    }
    return code_map.get(status_code, f"HTTP_{status_code}")

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())

def _render(error_response: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=error_response.code, content=jsonable_encoder(error_response))

async def validation_exception_handler(request: Request, exc: RequestValidationError):
    request_id = _request_id(request)
    errors = jsonable_encoder(exc.errors())
    logger.warning(f"[{request_id}] Validation error: {errors}", extra={"request_id": request_id})
    return _render(ErrorResponse(
        message="Request validation failed",
        data={"validation_errors": errors},
        code=422,
        error_code="VALIDATION_ERROR",
        request_id=request_id,
    ))

async def app_error_handler(request: Request, exc: AppError):
    request_id = _request_id(request)
    if exc.status_code >= 500:
        logger.error(f"[{request_id}] {exc.error_code}: {exc.message}", extra={"request_id": request_id})
    else:
        logger.warning(f"[{request_id}] {exc.error_code}: {exc.message}", extra={"request_id": request_id})
    return _render(ErrorResponse(
        message=exc.message,
        data=exc.data,
        code=exc.status_code,
        error_code=exc.error_code,
        hint=exc.hint,
        request_id=request_id,
    ))

async def global_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)

    if isinstance(exc, HTTPException):
        logger.warning(f"[{request_id}] HTTP {exc.status_code}: {exc.detail}", extra={"request_id": request_id})
        return _render(ErrorResponse(
            message=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
            code=exc.status_code,
            error_code=_get_error_code(exc.status_code),
            request_id=request_id,
        ))

    logger.error(f"[{request_id}] Unhandled exception: {exc}", exc_info=True, extra={"request_id": request_id})
    return _render(ErrorResponse(
        message="An unexpected error occurred",
        data={"error_type": type(exc).__name__},
        code=500,
        error_code="INTERNAL_SERVER_ERROR",
        request_id=request_id,
    ))
