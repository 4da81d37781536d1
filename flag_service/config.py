"""
Configuration management for the Feature Flag Service
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Every section reads the process environment first, then ``.env``
ENV_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    case_sensitive=False,
    extra="ignore",
)


class ServerConfig(BaseSettings):
    """Server configuration"""
    model_config = ENV_CONFIG

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=10001, validation_alias="PORT")
    keepalive_timeout: int = Field(default=5, validation_alias="KEEPALIVE_TIMEOUT")


class LoggingConfig(BaseSettings):
    """Logging configuration"""
    model_config = ENV_CONFIG

    level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    format: str = Field(default="json", validation_alias="LOG_FORMAT")
    access_log: bool = Field(default=False, validation_alias="ACCESS_LOG")
    log_file: Optional[str] = Field(default=None, validation_alias="LOG_FILE")

    @field_validator("format")
    @classmethod
    def validate_format(cls, v):
        if v.lower() not in ("json", "text"):
            raise ValueError("Log format must be 'json' or 'text'")
        return v.lower()


class MetricsConfig(BaseSettings):
    """Metrics configuration"""
    model_config = ENV_CONFIG

    enabled: bool = Field(default=True, validation_alias="METRICS_ENABLED")


class TracingConfig(BaseSettings):
    """Distributed tracing configuration"""
    model_config = ENV_CONFIG

    enabled: bool = Field(default=False, validation_alias="TRACING_ENABLED")
    service_name: str = Field(default="flag-service", validation_alias="TRACING_SERVICE_NAME")
    otlp_endpoint: str = Field(
        default="http://localhost:4318/v1/traces",
        validation_alias="OTLP_ENDPOINT",
    )


class Settings(BaseSettings):
    """Main application settings"""
    model_config = ENV_CONFIG

    # Environment
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    debug: bool = Field(default=False, validation_alias="DEBUG")

    # Component configurations
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    tracing: TracingConfig = Field(default_factory=TracingConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        allowed = ["development", "test", "staging", "production"]
        if v not in allowed:
            raise ValueError(f"Environment must be one of {allowed}")
        return v

    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment == "production"
