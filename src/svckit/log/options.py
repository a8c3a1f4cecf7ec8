"""Configuration items related to logging."""

import argparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONSOLE_FORMAT = "console"
JSON_FORMAT = "json"

VALID_LEVELS = ("debug", "info", "warning", "warn", "error", "critical")
VALID_FORMATS = (CONSOLE_FORMAT, JSON_FORMAT)

FLAG_NAME = "log.name"
FLAG_LEVEL = "log.level"
FLAG_FORMAT = "log.format"
FLAG_DEVELOPMENT = "log.development"
FLAG_ENABLE_COLOR = "log.enable-color"
FLAG_DISABLE_CALLER = "log.disable-caller"
FLAG_DISABLE_STACKTRACE = "log.disable-stacktrace"
FLAG_OUTPUT_PATHS = "log.output-paths"
FLAG_ERROR_OUTPUT_PATHS = "log.error-output-paths"


def _split_paths(value: str) -> list[str]:
    return [p.strip() for p in value.split(",") if p.strip()]


class LogOptions(BaseSettings):
    """Logging options loaded from ``LOG_*`` environment variables or flags."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    name: str = Field(
        default="",
        description="Logger name",
    )
    level: str = Field(
        default="info",
        description="Minimum log level (debug, info, warning, error, critical)",
    )
    format: str = Field(
        default=CONSOLE_FORMAT,
        description="Log output format (console or json)",
    )
    development: bool = Field(
        default=False,
        description="Development mode, renders exceptions more liberally",
    )
    enable_color: bool = Field(
        default=False,
        serialization_alias="enable-color",
        description="Enable ANSI colors in console format",
    )
    disable_caller: bool = Field(
        default=False,
        serialization_alias="disable-caller",
        description="Do not record caller module, function and line",
    )
    disable_stacktrace: bool = Field(
        default=False,
        serialization_alias="disable-stacktrace",
        description="Do not render stack traces and exception tracebacks",
    )
    output_paths: str | list[str] = Field(
        default=["stdout"],
        serialization_alias="output-paths",
        description="Log outputs: stdout, stderr or file paths (comma-separated or list)",
    )
    error_output_paths: str | list[str] = Field(
        default=["stderr"],
        serialization_alias="error-output-paths",
        description="Outputs that additionally receive error-level events",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level is valid."""
        level = v.lower()
        if level not in VALID_LEVELS:
            raise ValueError(f"unrecognized level: {v!r}")
        if level == "warn":
            return "warning"
        return level

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        """Validate log format is console or json."""
        fmt = v.lower()
        if fmt not in VALID_FORMATS:
            raise ValueError(f"not a valid log format: {v!r}")
        return fmt

    @field_validator("output_paths", "error_output_paths", mode="after")
    @classmethod
    def parse_paths(cls, v):
        """Parse comma-separated string into list."""
        if isinstance(v, str):
            return _split_paths(v)
        return v

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:
        """Add logging flags to ``parser`` using the current values as defaults."""
        group = parser.add_argument_group("logging")
        group.add_argument(
            f"--{FLAG_LEVEL}", dest="log_level", default=self.level, metavar="LEVEL",
            help="Minimum log output LEVEL.",
        )
        group.add_argument(
            f"--{FLAG_DISABLE_CALLER}", dest="log_disable_caller",
            action=argparse.BooleanOptionalAction, default=self.disable_caller,
            help="Disable output of caller information in the log.",
        )
        group.add_argument(
            f"--{FLAG_DISABLE_STACKTRACE}", dest="log_disable_stacktrace",
            action=argparse.BooleanOptionalAction, default=self.disable_stacktrace,
            help="Disable the log to record a stack trace for errors.",
        )
        group.add_argument(
            f"--{FLAG_FORMAT}", dest="log_format", default=self.format, metavar="FORMAT",
            help="Log output FORMAT, support console or json format.",
        )
        group.add_argument(
            f"--{FLAG_ENABLE_COLOR}", dest="log_enable_color",
            action=argparse.BooleanOptionalAction, default=self.enable_color,
            help="Enable output ansi colors in console format logs.",
        )
        group.add_argument(
            f"--{FLAG_OUTPUT_PATHS}", dest="log_output_paths", type=_split_paths,
            default=list(self.output_paths),
            help="Output paths of log, comma-separated.",
        )
        group.add_argument(
            f"--{FLAG_ERROR_OUTPUT_PATHS}", dest="log_error_output_paths", type=_split_paths,
            default=list(self.error_output_paths),
            help="Error output paths of log, comma-separated.",
        )
        group.add_argument(
            f"--{FLAG_DEVELOPMENT}", dest="log_development",
            action=argparse.BooleanOptionalAction, default=self.development,
            help="Development puts the logger in development mode, which renders "
            "exceptions and stack traces more liberally.",
        )
        group.add_argument(
            f"--{FLAG_NAME}", dest="log_name", default=self.name,
            help="The name of the logger.",
        )

    @classmethod
    def from_namespace(cls, namespace: argparse.Namespace) -> "LogOptions":
        """Build validated options from flags parsed with ``add_arguments``."""
        return cls(
            name=namespace.log_name,
            level=namespace.log_level,
            format=namespace.log_format,
            development=namespace.log_development,
            enable_color=namespace.log_enable_color,
            disable_caller=namespace.log_disable_caller,
            disable_stacktrace=namespace.log_disable_stacktrace,
            output_paths=namespace.log_output_paths,
            error_output_paths=namespace.log_error_output_paths,
        )

    def __str__(self) -> str:
        return self.model_dump_json(by_alias=True)
