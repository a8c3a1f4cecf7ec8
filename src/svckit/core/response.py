"""Render results and coded errors as HTTP JSON responses."""

from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from svckit.errors import CodedError, Registry, format_chain, parse_coder

logger = structlog.get_logger(__name__)


class ErrResponse(BaseModel):
    """Error envelope returned to HTTP clients."""

    code: int = Field(description="Business error code")
    message: str = Field(description="Error message safe to expose externally")
    reference: str = Field(
        default="",
        description="Reference document which may help to solve the error",
    )

    def to_body(self) -> dict[str, Any]:
        """Serialize the envelope, omitting an empty reference."""
        if self.reference:
            return self.model_dump()
        return self.model_dump(exclude={"reference"})


def write_response(
    request: Request | None,
    err: BaseException | None,
    data: Any = None,
    *,
    registry: Registry | None = None,
) -> JSONResponse:
    """Write an error or the response data into an HTTP JSON response.

    Errors are resolved with ``parse_coder``; the coder supplies the status,
    business code and user-safe message. Full error detail is only logged.

    Args:
        request: Request being answered, used for log context. May be None.
        err: Error to report, or None on success.
        data: Payload returned with status 200 when ``err`` is None.
        registry: Code registry to resolve against, defaults to the global one.

    Returns:
        JSONResponse carrying either ``data`` or an ErrResponse envelope.
    """
    if err is None:
        return JSONResponse(status_code=200, content=jsonable_encoder(data))

    logger.error(
        "request_failed",
        method=request.method if request is not None else None,
        path=request.url.path if request is not None else None,
        error=str(err),
        error_type=type(err).__name__,
        chain=format_chain(err, registry),
    )

    coder = parse_coder(err, registry)
    envelope = ErrResponse(
        code=coder.code(),
        message=coder.string(),
        reference=coder.reference(),
    )
    return JSONResponse(status_code=coder.http_status(), content=envelope.to_body())


def install_error_handlers(
    app: FastAPI,
    registry: Registry | None = None,
    catch_all: bool = True,
) -> None:
    """Register exception handlers that answer with ErrResponse envelopes.

    With ``catch_all`` every unhandled exception is mapped too, yielding the
    unknown-coder envelope instead of the framework's default 500 page.
    """

    async def coded_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return write_response(request, exc, registry=registry)

    app.add_exception_handler(CodedError, coded_error_handler)
    if catch_all:
        app.add_exception_handler(Exception, coded_error_handler)
