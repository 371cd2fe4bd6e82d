"""DigitalOcean REST API client package.

Provides an HTTP client for the DigitalOcean v2 REST API that maps each
endpoint to a typed method call and returns validated Pydantic models.

Exports:
    DigitalOceanClient: HTTP client with authentication and error handling.
    ApiAction: Endpoint catalog.
    ApiRequest: Request descriptor.
    ApiResponse: Response envelope.
    DigitalOceanError: Error reported by the API.
    RequestUnsuccessfulError: Request could not be completed.
    ResponseDecodeError: Response body did not have the expected shape.
    types: Module containing Pydantic models for API resources.
    DEFAULT_API_VERSION: Supported API version.
    DEFAULT_TIMEOUT: Default HTTP request timeout.
"""

from . import types
from .client import (
    DEFAULT_API_HOST,
    DEFAULT_API_VERSION,
    DEFAULT_TIMEOUT,
    DigitalOceanClient,
    decode_response,
)
from .endpoints import ActionType, ApiAction, RequestMethod
from .errors import DigitalOceanError, RequestUnsuccessfulError, ResponseDecodeError
from .request import ApiRequest, ApiResponse

__all__ = [
    "DEFAULT_API_HOST",
    "DEFAULT_API_VERSION",
    "DEFAULT_TIMEOUT",
    "ActionType",
    "ApiAction",
    "ApiRequest",
    "ApiResponse",
    "DigitalOceanClient",
    "DigitalOceanError",
    "RequestMethod",
    "RequestUnsuccessfulError",
    "ResponseDecodeError",
    "decode_response",
    "types",
]
