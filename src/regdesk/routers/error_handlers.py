"""Map application errors onto HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from regdesk.errors import (
    AuthError,
    BackendError,
    ResolutionError,
    UnsupportedFieldType,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Validation failed on {request.url.path}: {exc.codes()}")
    return JSONResponse(status_code=400, content=exc.to_dict())


async def unsupported_field_type_handler(request: Request, exc: UnsupportedFieldType):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def resolution_error_handler(request: Request, exc: ResolutionError):
    logger.warning(f"Reference data unavailable on {request.url.path}: {exc}")
    return JSONResponse(status_code=409, content={"detail": str(exc), "blocked": True})


async def backend_error_handler(request: Request, exc: BackendError):
    logger.error(f"Backend failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})


async def auth_error_handler(request: Request, exc: AuthError):
    return RedirectResponse(url="/admin/login", status_code=303)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UnsupportedFieldType, unsupported_field_type_handler)
    app.add_exception_handler(ResolutionError, resolution_error_handler)
    app.add_exception_handler(BackendError, backend_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
