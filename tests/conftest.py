"""Pytest configuration and shared fixtures."""

import json
from collections.abc import Callable

import httpx
import pytest
from tauros.config import Config
from tauros.exchange.auth import Credentials, NonceProvider
from tauros.exchange.client import TaurosClient

# base64 of b"test-secret"
TEST_SECRET = "dGVzdC1zZWNyZXQ="


@pytest.fixture
def config() -> Config:
    """Config with test credentials."""
    return Config(
        tauros_api_key="test-key",
        tauros_api_secret=TEST_SECRET,
        tauros_base_url="https://api.staging.tauros.io",
        request_timeout=3.0,
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials("test-key", TEST_SECRET)


@pytest.fixture
def fixed_nonce() -> NonceProvider:
    """Nonce provider frozen at 1600000000000 ms."""
    return NonceProvider(clock=lambda: 1_600_000_000.0)


@pytest.fixture
def recorded() -> list[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture
def make_client(
    credentials: Credentials,
    fixed_nonce: NonceProvider,
    recorded: list[httpx.Request],
) -> Callable[..., TaurosClient]:
    """Build a TaurosClient whose transport answers with ``handler``.

    ``handler`` maps a request to ``(status, body)``; ``body`` is sent
    verbatim when bytes, JSON-encoded otherwise.
    """

    def _make(handler: Callable[[httpx.Request], tuple[int, object]]) -> TaurosClient:
        def _respond(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            status, body = handler(request)
            content = body if isinstance(body, bytes) else json.dumps(body).encode()
            return httpx.Response(status, content=content)

        return TaurosClient(
            credentials=credentials,
            base_url="https://api.staging.tauros.io",
            nonce_provider=fixed_nonce,
            transport=httpx.MockTransport(_respond),
        )

    return _make
