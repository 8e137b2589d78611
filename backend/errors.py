"""
backend/errors.py

Application error taxonomy and the FastAPI handlers that render it.

Every error response has the shape {"message": str, "errors"?: list}.
Unexpected exceptions become a generic 500; details stay in server logs.
"""

from __future__ import annotations

import traceback
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.config import IS_DEV


class AppError(Exception):
    """Base class for errors that map to a client-visible status code."""
    status_code = 500

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500


def error_body(message: str, errors: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return body


def format_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors to [{"field", "message"}], dropping the body/query prefix."""
    out = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        out.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return out


# Routes whose validation failures get a more specific message
VALIDATION_MESSAGES = {
    "/api/projects": "Invalid filter parameters",
}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError):
        print(f"[ERROR] {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=500, content=error_body("Internal server error"))
    if IS_DEV:
        print(f"[ERROR] {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.errors))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = format_validation_errors(exc)
    path = request.url.path
    if path.startswith("/api/projects/"):
        message = "Invalid project ID"
    else:
        message = VALIDATION_MESSAGES.get(path, "Invalid request")
    if IS_DEV:
        print(f"[VALIDATION] {request.method} {path}: {errors}")
    return JSONResponse(status_code=400, content=error_body(message, errors))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(status_code=exc.status_code, content=error_body(message), headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # Never leak internals to the client
    print(f"[ERROR] Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    if IS_DEV:
        traceback.print_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=500, content=error_body("Internal server error"))


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
