import logging
from http import HTTPStatus

from fastapi import Request as FastAPIRequest
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from queuepanel.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class ApiErrorResponse(BaseModel):
    statusCode: int
    error: str
    message: str


class ApiRequestError(Exception):
    """Error surfaced to the client with its own status code."""

    def __init__(self, message: str = "", status_code: int = 400, type: str = "request_error"):
        self.status_code = status_code
        self.type = type
        self.message = message or HTTPStatus(status_code).phrase
        super().__init__(self.message)


class NotFoundError(ApiRequestError):
    def __init__(self, message: str = ""):
        super().__init__(message, status_code=404, type="not_found")


async def api_request_error_handler(request: FastAPIRequest, exc: ApiRequestError) -> JSONResponse:
    logger.debug("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.type)
    body = ApiErrorResponse(
        statusCode=exc.status_code,
        error=HTTPStatus(exc.status_code).phrase,
        message=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())
