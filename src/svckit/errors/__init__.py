"""Business error codes, coded errors and the code registry."""

from svckit.errors.code import (
    ALLOWED_HTTP_STATUSES,
    UNKNOWN_CODER,
    CodeRegistrationError,
    Coder,
    DefaultCoder,
    Registry,
    get_registry,
    is_code,
    must_register,
    parse_coder,
    register,
)
from svckit.errors.coded import CodedError, format_chain, with_code, wrap_c
from svckit.errors.codes import ErrCode

__all__ = [
    "ALLOWED_HTTP_STATUSES",
    "CodeRegistrationError",
    "CodedError",
    "Coder",
    "DefaultCoder",
    "ErrCode",
    "Registry",
    "UNKNOWN_CODER",
    "format_chain",
    "get_registry",
    "is_code",
    "must_register",
    "parse_coder",
    "register",
    "with_code",
    "wrap_c",
]
