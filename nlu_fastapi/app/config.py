"""Application configuration management."""

import logging
import re
from functools import lru_cache
from typing import Any

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings

# Whitespace followed by "#" up to the end of the value
_INLINE_COMMENT = re.compile(r"\s+#.*$", re.DOTALL)


class Settings(BaseSettings):
    """Application settings managed via Pydantic BaseSettings.

    Attributes:
        API_VERSION: The version of the API.
        NLU_APIKEY: API key for the Watson NLU service (also read from ``nlu_apikey``).
        NLU_URL: Service URL of the Watson NLU instance (also read from ``nlu_url``).
        NLU_VERSION: Watson NLU API version date.
        NLU_TIMEOUT: Timeout in seconds for the outbound NLU call.
        NLU_ROUTE_PREFIX: Path the NLU router is mounted on, below the API prefix.
        NLU_FEATURES_FILE: Optional path to the features YAML file.
        MAX_TEXT_LENGTH: Maximum allowed text length for analysis.
        OTEL_ENABLED: Whether OpenTelemetry instrumentation is enabled.
        OTEL_SERVICE_NAME: The service name for OpenTelemetry.
        OTEL_EXPORTER_OTLP_ENDPOINT: The OTLP endpoint for OpenTelemetry.
        OTEL_TRACES_SAMPLER_ARG: The sampling rate for traces.
        OTEL_PYTHON_FASTAPI_EXCLUDED_URLS: URLs to exclude from tracing.
        OTLP_SECURE: Whether to use a secure connection for OTLP.
        PROMETHEUS_MONITORED_PATHS: Comma-separated path suffixes with HTTP metrics.
        REQUESTS_PER_MINUTE: Allowed NLU requests per minute per client.
        LOG_LEVEL: The logging level for the application.
        SERVER_HOST: The host address for the server.
        SERVER_PORT: The port number for the server.
        ALLOWED_ORIGINS: Comma-separated string of allowed CORS origins.
    """

    # API Version
    API_VERSION: str = "v1"

    # Watson NLU Configuration
    NLU_APIKEY: str | None = Field(
        default=None, validation_alias=AliasChoices("NLU_APIKEY", "nlu_apikey")
    )
    NLU_URL: str | None = Field(
        default=None, validation_alias=AliasChoices("NLU_URL", "nlu_url")
    )
    NLU_VERSION: str = "2022-04-07"
    NLU_TIMEOUT: float = 10.0
    NLU_ROUTE_PREFIX: str = "/nlu"
    NLU_FEATURES_FILE: str | None = None
    MAX_TEXT_LENGTH: int = 50000

    # OpenTelemetry Configuration
    OTEL_ENABLED: bool = True
    OTEL_SERVICE_NAME: str = "nlu-fastapi"
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4317"
    OTEL_TRACES_SAMPLER_ARG: float = 1.0
    OTEL_PYTHON_FASTAPI_EXCLUDED_URLS: str = "health,metrics"
    OTLP_SECURE: bool = False

    # Prometheus Configuration
    PROMETHEUS_MONITORED_PATHS: str = "nlu/,health"

    # Rate Limiting Settings
    REQUESTS_PER_MINUTE: int = 60

    # Logging Configuration
    LOG_LEVEL: str = "INFO"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8000
    ALLOWED_ORIGINS: str = ""

    @model_validator(mode="before")
    @classmethod
    def _strip_inline_comments(cls, data: Any) -> Any:
        if isinstance(data, dict):
            cleaned_data = {}
            for key, value in data.items():
                if isinstance(value, str):
                    cleaned_data[key] = _INLINE_COMMENT.sub("", value).strip()
                else:
                    cleaned_data[key] = value
            return cleaned_data
        return data

    @property
    def api_prefix(self) -> str:
        """Path prefix shared by all API routes, e.g. ``/api/v1``."""
        return f"/api/{self.API_VERSION}"

    @property
    def has_provider_credentials(self) -> bool:
        """Whether both the NLU API key and service URL are set and non-blank."""
        return bool(
            self.NLU_APIKEY and self.NLU_APIKEY.strip()
            and self.NLU_URL and self.NLU_URL.strip()
        )

    @property
    def cors_origins(self) -> list[str]:
        """Get the list of allowed CORS origins.

        Returns:
            A list of allowed CORS origins split from the ALLOWED_ORIGINS setting.
            If no origins are configured, returns an empty list.
        """
        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def monitored_paths(self) -> list[str]:
        """Full request paths that get Prometheus HTTP metrics."""
        return [
            f"{self.api_prefix}/{suffix.strip()}"
            for suffix in self.PROMETHEUS_MONITORED_PATHS.split(",")
            if suffix.strip()
        ]

    @property
    def log_level(self) -> int:
        """Convert the string log level from settings to a logging constant.

        Returns:
            The integer value of the logging level (e.g., logging.INFO,
            logging.DEBUG). Defaults to logging.INFO if the configured
            LOG_LEVEL is invalid.
        """
        return getattr(logging, self.LOG_LEVEL.upper(), logging.INFO)

    class Config:
        """Pydantic configuration class for Settings.

        Attributes:
            env_file (str): The name of the environment file to load (e.g., ".env").
            case_sensitive (bool): Whether environment variable names are case-sensitive.
        """

        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Create and cache a Settings instance.

    Returns:
        A cached instance of the Settings class.
    """
    return Settings()


settings = get_settings()
