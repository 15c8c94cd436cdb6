"""
Error taxonomy and the HTTP mapping for it.
"""

from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str


class IdpConsoleError(Exception):
    status_code: int = 500
    detail: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.detail
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {"detail": self.detail}


class ValidationError(IdpConsoleError):
    """
    Malformed or incomplete admin input, every violation at once.
    """

    status_code = 400
    detail = "Invalid request"

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    def to_response(self) -> dict:
        return {
            "detail": self.detail,
            "errors": [error.model_dump() for error in self.errors],
        }


class NotFound(IdpConsoleError):
    status_code = 404
    detail = "Not found"

    def __init__(self, resource: str = "Client", identifier: Optional[str] = None):
        self.resource = resource
        self.identifier = identifier
        self.detail = f"{resource} not found"
        super().__init__(self.detail)


class Unauthorized(IdpConsoleError):
    status_code = 401
    detail = "Unauthorized"


class ExternalServiceError(IdpConsoleError):
    """
    The upstream authorization server failed or answered with something unusable.
    The message carries the raw detail for logs, the response never does.
    """

    status_code = 502
    detail = "Authorization failed"

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(message)


class ConflictError(IdpConsoleError):
    status_code = 409
    detail = "Conflict"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(IdpConsoleError)
    async def _handle_idp_console_error(request: Request, exc: IdpConsoleError):
        if exc.status_code >= 500 or isinstance(exc, ConflictError):
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_response())
