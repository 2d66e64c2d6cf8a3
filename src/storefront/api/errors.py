"""Maps storefront and Protean exceptions to JSON error responses.

Every error body has the same shape: ``{"error", "message", "details"}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from storefront.exceptions import StorefrontError

logger = structlog.get_logger(__name__)


def _body(kind: str, message: str, details=None) -> dict:
    return {"error": kind, "message": message, "details": details or {}}


async def _storefront_error(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("Request failed", path=request.url.path, error=exc.kind, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _validation_error(_request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=_body("validation_error", "Invalid input", exc.messages),
    )


async def _request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    details = {".".join(str(part) for part in error["loc"]): [error["msg"]] for error in exc.errors()}
    return JSONResponse(status_code=400, content=_body("validation_error", "Invalid request", details))


async def _object_not_found(_request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content=_body("not_found", str(exc)))


def register_exception_handlers(app: FastAPI) -> None:
    """Install Protean's default handlers, then the storefront error shapes over them."""
    register_protean_handlers(app)
    app.add_exception_handler(StorefrontError, _storefront_error)
    app.add_exception_handler(ValidationError, _validation_error)
    app.add_exception_handler(RequestValidationError, _request_validation_error)
    app.add_exception_handler(ObjectNotFoundError, _object_not_found)
