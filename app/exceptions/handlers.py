import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from .custom import FetchError, InvalidInputError

logger = logging.getLogger(__name__)


async def invalid_input_error_handler(_request: Request, exc: InvalidInputError) -> JSONResponse:
    logger.info("Rejected request: %s", exc.message)
    return JSONResponse(status_code=400, content={"error": exc.message})


async def fetch_error_handler(_request: Request, exc: FetchError) -> JSONResponse:
    logger.error("Fetch error: %s (phone=%s)", exc.message, exc.phone)
    return JSONResponse(status_code=500, content={"error": exc.message})
