"""Error values that carry a business code and a cause chain."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from svckit.errors.code import Registry


class CodedError(Exception):
    """An error carrying a business code.

    Attributes:
        code: Business code, expected to be registered in the code registry.
        message: Developer-facing context added where the error was wrapped.
        cause: The wrapped error, None at the root of a chain.
    """

    def __init__(self, code: int, message: str, cause: BaseException | None = None):
        # args mirror the constructor so instances survive pickling
        super().__init__(code, message, cause)
        self.code = code
        self.message = message
        self.cause = cause
        self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        if not self.message:
            return str(self.cause)
        return f"{self.message}: {self.cause}"

    def __repr__(self) -> str:
        return f"CodedError(code={self.code!r}, message={self.message!r}, cause={self.cause!r})"


def wrap_c(cause: BaseException | None, code: int, message: str, *args) -> CodedError:
    """Wrap ``cause`` in a new CodedError.

    ``message`` is %-formatted with ``args`` when any are given.
    """
    if args:
        message = message % args
    return CodedError(code, message, cause)


def with_code(code: int, message: str, *args) -> CodedError:
    """Create a root CodedError with no cause."""
    return wrap_c(None, code, message, *args)


def format_chain(err: BaseException, registry: "Registry | None" = None) -> str:
    """Render an error chain for operators, one link per line."""
    # Imported here; code.py depends on this module
    from svckit.errors.code import parse_coder

    lines = []
    seen: set[int] = set()
    current: BaseException | None = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        indent = "  " * len(lines)
        if isinstance(current, CodedError):
            coder = parse_coder(current, registry)
            lines.append(
                f"{indent}#{len(lines)} code={current.code} ext={coder.string()!r} "
                f"message={current.message!r}"
            )
            current = current.cause
        else:
            lines.append(f"{indent}#{len(lines)} {type(current).__name__}: {current}")
            current = current.__cause__

    return "\n".join(lines)
