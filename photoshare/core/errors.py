import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class PhotoshareError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthorized(PhotoshareError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication required"


class Forbidden(PhotoshareError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have permission to perform this action"


class NotFound(PhotoshareError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Conflict(PhotoshareError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class InvalidArgument(PhotoshareError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request"


class PayloadTooLarge(PhotoshareError):
    status_code = 413
    default_detail = "File too large (max 5MB)"


class Internal(PhotoshareError):
    pass


async def photoshare_error_handler(request: Request, exc: PhotoshareError):
    headers = None
    if isinstance(exc, Unauthorized):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, Internal):
        # details are already logged where the error was raised
        return JSONResponse(status_code=exc.status_code, content={"detail": Internal.default_detail})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(PhotoshareError, photoshare_error_handler)
