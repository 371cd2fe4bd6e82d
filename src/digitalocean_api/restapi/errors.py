"""Exceptions raised by the DigitalOcean REST API client.

Missing or invalid arguments raise the builtin :class:`ValueError` before any
request is sent. Everything that happens after the request leaves the client
is reported through one of the classes below.
"""


class DigitalOceanError(Exception):
    """The API rejected the request (HTTP 4xx/5xx with an error body)."""

    def __init__(self, message: str, error_id: str, status_code: int):
        super().__init__(
            f"HTTP Status Code: {status_code}, Error Id: {error_id}, Error Message: {message}",
        )
        self.message = message
        self.error_id = error_id
        self.status_code = status_code


class RequestUnsuccessfulError(Exception):
    """The request could not be completed; its outcome is unknown."""


class ResponseDecodeError(RequestUnsuccessfulError):
    """A successful response body did not have the expected shape."""
