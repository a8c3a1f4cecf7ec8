"""Business error codes and the process-wide code registry."""

import threading
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import structlog

from svckit.errors.coded import CodedError

logger = structlog.get_logger(__name__)

# Code 0 is never a valid business code
RESERVED_CODE = 0
UNKNOWN_CODE = 1

# HTTP statuses a business code may map to
ALLOWED_HTTP_STATUSES = frozenset({200, 400, 401, 403, 404, 500})


class CodeRegistrationError(RuntimeError):
    """Raised when the static error-code setup of a program is invalid."""

    pass


@runtime_checkable
class Coder(Protocol):
    """A business error code with its HTTP mapping."""

    def code(self) -> int:
        """Integer business code."""
        ...

    def http_status(self) -> int:
        """HTTP status to use for this code."""
        ...

    def string(self) -> str:
        """External (user-facing) error text."""
        ...

    def reference(self) -> str:
        """Reference document for the error, empty if there is none."""
        ...


@dataclass(frozen=True)
class DefaultCoder:
    """Plain coder used for codes owned by this package.

    Attributes:
        bcode: Integer business code.
        http_code: HTTP status; 0 means "not set" and reports 500.
        ext: External error text.
        ref: Reference document.
    """

    bcode: int
    http_code: int
    ext: str
    ref: str = ""

    def code(self) -> int:
        return self.bcode

    def http_status(self) -> int:
        if self.http_code == 0:
            return 500
        return self.http_code

    def string(self) -> str:
        return self.ext

    def reference(self) -> str:
        return self.ref

    def __str__(self) -> str:
        return self.ext


UNKNOWN_CODER = DefaultCoder(
    bcode=UNKNOWN_CODE,
    http_code=500,
    ext="An internal server error occurred",
)


def check_http_status(status: int) -> None:
    """Raise CodeRegistrationError if a business code may not map to ``status``."""
    if status not in ALLOWED_HTTP_STATUSES:
        allowed = ", ".join(str(s) for s in sorted(ALLOWED_HTTP_STATUSES))
        raise CodeRegistrationError(f"http code {status} not in `{allowed}`")


def _validate(coder: Coder) -> int:
    code = coder.code()
    if code == RESERVED_CODE:
        raise CodeRegistrationError("code `0` is reserved as `unknownCode` error code")
    check_http_status(coder.http_status())
    return code


class Registry:
    """Mapping of business code to coder.

    Mutations are serialized under a lock. Lookups read the underlying dict
    directly; registration is expected to finish during program
    initialization.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._codes: dict[int, Coder] = {UNKNOWN_CODER.code(): UNKNOWN_CODER}

    def register(self, coder: Coder) -> None:
        """Register a coder, overwriting any existing entry for its code."""
        code = _validate(coder)

        with self._lock:
            if code in self._codes:
                logger.debug("error_code_overwritten", code=code)
            self._codes[code] = coder

    def must_register(self, coder: Coder) -> None:
        """Register a coder, failing if its code is already present."""
        code = _validate(coder)

        with self._lock:
            if code in self._codes:
                raise CodeRegistrationError(f"code: {code} already exist")
            self._codes[code] = coder

    def get(self, code: int) -> Coder | None:
        return self._codes.get(code)

    def __contains__(self, code: object) -> bool:
        return code in self._codes

    def __len__(self) -> int:
        return len(self._codes)


# Global singleton
codes = Registry()


def get_registry() -> Registry:
    """Get the process-wide code registry."""
    return codes


def register(coder: Coder) -> None:
    """Register a user-defined error code in the global registry.

    Overwrites an existing code.
    """
    codes.register(coder)


def must_register(coder: Coder) -> None:
    """Register a user-defined error code in the global registry.

    Raises CodeRegistrationError when the code already exists.
    """
    codes.must_register(coder)


def parse_coder(err: BaseException | None, registry: Registry | None = None) -> Coder | None:
    """Resolve an error to its coder.

    Only the top-level error is inspected: a CodedError with a registered code
    resolves to that coder, anything else to UNKNOWN_CODER. None yields None.
    """
    if err is None:
        return None

    if registry is None:
        registry = codes
    if isinstance(err, CodedError):
        coder = registry.get(err.code)
        if coder is not None:
            return coder

    return UNKNOWN_CODER


def is_code(err: BaseException | None, code: int) -> bool:
    """Report whether any CodedError in err's cause chain has the given code."""
    while isinstance(err, CodedError):
        if err.code == code:
            return True
        err = err.cause

    return False
