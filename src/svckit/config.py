import signal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from svckit.log.options import LogOptions


class Settings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    service_name: str = Field(
        default="svckit",
        description="Service name bound to log events",
    )
    environment: str = Field(
        default="production",
        description="Deployment environment",
    )

    # Graceful shutdown
    shutdown_signals: str | list[str] = Field(
        default=["SIGINT", "SIGTERM"],
        description="Signals that trigger graceful shutdown (comma-separated or list)",
    )

    # Logging (read from LOG_* variables)
    log: LogOptions = Field(default_factory=LogOptions)

    @field_validator("shutdown_signals", mode="after")
    @classmethod
    def parse_shutdown_signals(cls, v):
        """Parse comma-separated signal names and check they exist."""
        if isinstance(v, str):
            v = [name.strip() for name in v.split(",") if name.strip()]
        names = [name.upper() for name in v]
        unknown = [name for name in names if name not in signal.Signals.__members__]
        if unknown:
            raise ValueError(f"Unknown signal names: {unknown}")
        return names

    @property
    def shutdown_signals_list(self) -> list[signal.Signals]:
        """Get shutdown signals as signal enum members."""
        return [signal.Signals[name] for name in self.shutdown_signals]


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings
