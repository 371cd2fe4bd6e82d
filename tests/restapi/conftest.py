"""Shared fixtures for REST API client tests.

The client is wired to an ``httpx.MockTransport`` whose handler records every
request and answers with a configurable status and body, so tests can assert
on exactly what went over the wire (or that nothing did).
"""

from dataclasses import dataclass, field

import httpx
import pytest

from digitalocean_api.restapi import client


@dataclass
class FakeApi:
    """Scripted stand-in for the DigitalOcean API."""

    status_code: int = 200
    body: str = "{}"
    error: Exception | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def respond(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, content=self.body.encode())

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def do_client(fake_api: FakeApi):
    """DigitalOceanClient whose transport is the fake API."""
    api_client = client.DigitalOceanClient(
        "test-token",
        transport=httpx.MockTransport(fake_api.handler),
    )
    yield api_client
    api_client.close()
