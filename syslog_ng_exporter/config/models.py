"""Pydantic configuration models for the syslog-ng exporter."""

from pydantic import BaseModel, Field, field_validator

RESERVED_PATHS = ("/", "/reload", "/healthcheck")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SocketConfig(BaseModel):
    """Location of the syslog-ng control socket."""
    path: str = "/var/lib/syslog-ng/syslog-ng.ctl"
    timeout_seconds: float = Field(default=1.0, gt=0, le=60)  # Absolute deadline per session


class TelemetryConfig(BaseModel):
    """HTTP listener configuration."""
    host: str = "0.0.0.0"
    port: int = Field(default=9577, ge=1, le=65535)
    endpoint: str = "/metrics"

    @field_validator('endpoint')
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Metrics path must be absolute and not shadow the command endpoints."""
        if not v.startswith('/'):
            raise ValueError('Metrics endpoint must start with /')
        if v in RESERVED_PATHS:
            raise ValueError(f'Metrics endpoint cannot be one of {", ".join(RESERVED_PATHS)}')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names in any case."""
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f'Unknown log level: {v}')
        return level


class ExporterConfig(BaseModel):
    """Root configuration model for the exporter."""
    socket: SocketConfig = Field(default_factory=SocketConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
