"""Validated error codes for library users to register at import time.

Example::

    ErrUserNotFound = 110001

    register(ErrUserNotFound, 404, "User not found")
"""

from dataclasses import dataclass

from svckit.errors.code import Registry, check_http_status, get_registry


@dataclass(frozen=True)
class ErrCode:
    """Coder implementation with a validated HTTP status.

    Attributes:
        bcode: Integer business code.
        http_code: HTTP status, one of ALLOWED_HTTP_STATUSES.
        ext: External (user) facing error text.
        ref: Reference document, empty if none.
    """

    bcode: int
    http_code: int
    ext: str
    ref: str = ""

    def __post_init__(self):
        """Validate the HTTP status after initialization."""
        check_http_status(self.http_code)

    def code(self) -> int:
        return self.bcode

    def http_status(self) -> int:
        return self.http_code

    def string(self) -> str:
        return self.ext

    def reference(self) -> str:
        return self.ref

    def __str__(self) -> str:
        return self.ext


def register(
    code: int,
    http_status: int,
    message: str,
    reference: str = "",
    registry: Registry | None = None,
) -> ErrCode:
    """Build an ErrCode and register it, failing on duplicate codes."""
    coder = ErrCode(bcode=code, http_code=http_status, ext=message, ref=reference)
    if registry is None:
        registry = get_registry()
    registry.must_register(coder)
    return coder
