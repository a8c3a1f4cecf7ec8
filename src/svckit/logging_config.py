"""Logging configuration driven by LogOptions."""

import logging
import sys
from typing import Any, TextIO

import structlog

from svckit.config import get_settings
from svckit.log.options import JSON_FORMAT, LogOptions

_ERROR_METHODS = frozenset({"error", "critical", "exception", "fatal"})

# File outputs stay open for the life of the process
_open_files: dict[str, TextIO] = {}


def _open_output(path: str) -> TextIO:
    if path == "stdout":
        return sys.stdout
    if path == "stderr":
        return sys.stderr
    if path not in _open_files:
        _open_files[path] = open(path, "a", encoding="utf-8")
    return _open_files[path]


class _MultiWriter:
    """File-like object writing to several outputs."""

    def __init__(self, outputs: list[TextIO]) -> None:
        self._outputs = outputs

    def write(self, data: str) -> None:
        for out in self._outputs:
            out.write(data)

    def flush(self) -> None:
        for out in self._outputs:
            out.flush()


class _ErrorTee:
    """Wrap the final renderer and copy error-level lines to error outputs."""

    def __init__(self, renderer: Any, error_writer: _MultiWriter | None) -> None:
        self._renderer = renderer
        self._error_writer = error_writer

    def __call__(self, logger: Any, method_name: str, event_dict: dict) -> str:
        rendered = self._renderer(logger, method_name, event_dict)
        if self._error_writer is not None and method_name in _ERROR_METHODS:
            self._error_writer.write(rendered + "\n")
            self._error_writer.flush()
        return rendered


def _add_logger_name(name: str):
    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("logger", name)
        return event_dict

    return processor


def _stack_info_on_error(logger: Any, method_name: str, event_dict: dict) -> dict:
    if method_name in _ERROR_METHODS:
        event_dict.setdefault("stack_info", True)
    return event_dict


def _drop_tracebacks(logger: Any, method_name: str, event_dict: dict) -> dict:
    event_dict.pop("exc_info", None)
    event_dict.pop("stack_info", None)
    return event_dict


def configure_logging(options: LogOptions | None = None) -> None:
    """Configure structlog for the application."""
    if options is None:
        options = get_settings().log

    is_json = options.format == JSON_FORMAT
    log_level = getattr(logging, options.level.upper())

    # Shared processors
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.UnicodeDecoder(),
    ]
    if options.name:
        shared_processors.append(_add_logger_name(options.name))
    if not options.disable_caller:
        shared_processors.append(
            structlog.processors.CallsiteParameterAdder(
                {
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                }
            )
        )
    if options.disable_stacktrace:
        shared_processors.append(_drop_tracebacks)
    else:
        if options.development:
            shared_processors.append(_stack_info_on_error)
        shared_processors.append(structlog.processors.StackInfoRenderer())

    renderer: Any
    if is_json:
        # Production: JSON output with tracebacks rendered into the event
        if not options.disable_stacktrace:
            shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        # Development: console output
        renderer = structlog.dev.ConsoleRenderer(colors=options.enable_color)

    output_paths = list(options.output_paths)
    error_paths = [p for p in options.error_output_paths if p not in output_paths]
    writer = _MultiWriter([_open_output(p) for p in output_paths])
    error_writer = _MultiWriter([_open_output(p) for p in error_paths]) if error_paths else None

    structlog.configure(
        processors=shared_processors + [_ErrorTee(renderer, error_writer)],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=writer),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    # Explicitly set root logger level
    logging.root.setLevel(log_level)
