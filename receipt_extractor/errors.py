import logging

import sentry_sdk
from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger("receipt_extractor")


class ReceiptError(Exception):
    """Base for errors that are rendered to the caller as ``{"kind", "message"}``."""

    kind = "server_error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(ReceiptError):
    """Client-correctable: bad upload or a model response that fails schema checks."""

    kind = "invalid_input"
    status_code = 400


class ServerError(ReceiptError):
    """Not client-correctable: model/provider failures, misconfiguration, storage."""

    kind = "server_error"
    status_code = 500


def receipt_error_handler(request: Request, exc: ReceiptError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"kind": exc.kind, "message": exc.message},
    )


def generic_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {exc}",
        exc_info=exc,
    )
    # No-op unless sentry_sdk.init() ran
    sentry_sdk.capture_exception(exc)
    return JSONResponse(
        status_code=500,
        content={"kind": ServerError.kind, "message": "Internal server error"},
    )
