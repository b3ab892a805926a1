"""
Domain Error Handler.

Turns ``CmsError`` raised by services into JSON responses carrying the
error's HTTP status, so services never import the web framework.
"""

from fastapi import Request
from fastapi.responses import JSONResponse

from quillpress.core.errors import CmsError
from quillpress.core.logging_config import get_logger

logger = get_logger(__name__)


async def cms_error_handler(request: Request, exc: CmsError) -> JSONResponse:
    """
    Answer a rejected CMS operation with its status code.

    The body is ``{"detail": message}``, plus ``details`` when the error
    carries structured context.
    """
    logger.info(f"{request.method} {request.url.path} rejected with {exc.status_code}: {exc.message}")
    content = {"detail": exc.message}
    if exc.details is not None:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
