"""Configuration, logging setup and client factory."""

import json
import logging
import os
import pathlib

import pydantic
import structlog

from . import restapi

CONFIG_ENV_VAR = "DIGITALOCEAN_CLIENT_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for the DigitalOcean API client."""

    api_token_file: str = pydantic.Field(
        description="Path to file containing the API auth token",
    )
    api_version: str = pydantic.Field(
        restapi.DEFAULT_API_VERSION,
        description="DigitalOcean REST API version",
    )
    api_host: str = pydantic.Field(
        restapi.DEFAULT_API_HOST,
        description="DigitalOcean REST API host name",
    )
    timeout: float = pydantic.Field(
        restapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str) -> ClientConfig:
    """Load configuration from JSON file."""
    path = pathlib.Path(config_path)
    if not path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def read_token(token_file: str | pathlib.Path) -> str:
    """Read the API token from a file, stripping surrounding whitespace.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If the file is empty.
    """
    token_path = pathlib.Path(token_file)
    if not token_path.exists():
        msg = f"Token file not found: {token_file}"
        raise FileNotFoundError(msg)
    token = token_path.read_text().strip()
    if not token:
        msg = f"Token file is empty: {token_file}"
        raise ValueError(msg)
    return token


def build_client(config: ClientConfig) -> restapi.DigitalOceanClient:
    """Construct a client from validated config."""
    rest_client = restapi.DigitalOceanClient(
        read_token(config.api_token_file),
        config.api_version,
        api_host=config.api_host,
        timeout=config.timeout,
    )
    logger.info("Created REST client", api_host=config.api_host, api_version=config.api_version)
    return rest_client


def create_client(config_path: str | None = None) -> restapi.DigitalOceanClient:
    """Create a client using a config path or environment default."""
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR, "config.json")
    config = load_config(resolved_path)
    configure_logging(config.log_level)
    return build_client(config)
