import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from seatbook.core.exceptions import SeatbookError

logger = logging.getLogger(__name__)


async def seatbook_error_handler(request: Request, exc: SeatbookError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SeatbookError, seatbook_error_handler)
