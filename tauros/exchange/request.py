"""Versioned URL, header and signature assembly for outgoing requests."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from loguru import logger

from .auth import EMPTY_BODY, Credentials, NonceProvider, canonical_message, sign
from .errors import ConfigurationError

API_PREFIX = "/api"
DEFAULT_TIMEOUT = 3.0


@dataclass(slots=True, frozen=True, kw_only=True)
class RequestSpec:
    """One logical API call.

    ``path`` is relative to the versioned prefix, e.g. ``"trading/markets"``.
    """

    version: int
    method: str
    path: str
    auth: bool = False
    body: bytes = b""
    params: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.version < 1:
            raise ValueError(f"API version must be positive, got {self.version}")
        if (
            not self.path
            or self.path.startswith(("/", "api/"))
            or self.path.endswith("/")
        ):
            raise ValueError(f"path must be unversioned and relative: {self.path!r}")
        object.__setattr__(self, "method", self.method.upper())

    @property
    def absolute_path(self) -> str:
        """``/api/v{version}/{path}``, with a trailing slash only when signed.

        Public endpoints reject the slash and signed ones require it.
        """
        path = f"{API_PREFIX}/v{self.version}/{self.path}"
        if self.auth:
            path += "/"
        return path

    @property
    def wire_body(self) -> bytes:
        if self.body:
            return self.body
        return b"" if self.method == "GET" else EMPTY_BODY


class RequestAssembler:
    """Builds ready-to-send ``httpx.Request`` objects, signing when required."""

    def __init__(
        self,
        credentials: Credentials | None,
        nonce_provider: NonceProvider | None = None,
    ) -> None:
        self.credentials = credentials
        self.nonce_provider = nonce_provider or NonceProvider()

    def build(
        self, spec: RequestSpec, base_url: str, timeout: float = DEFAULT_TIMEOUT
    ) -> httpx.Request:
        path = spec.absolute_path
        body = spec.wire_body
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        if spec.auth:
            headers.update(self._auth_headers(spec.method, path, body))

        # signed last: nothing may touch the request after this point
        return httpx.Request(
            spec.method,
            base_url.rstrip("/") + path,
            params=spec.params,
            headers=headers,
            content=body,
            extensions={"timeout": httpx.Timeout(timeout).as_dict()},
        )

    def _auth_headers(self, method: str, path: str, body: bytes) -> dict[str, str]:
        if self.credentials is None:
            msg = f"{method} {path} requires credentials but none were configured"
            raise ConfigurationError(msg)

        nonce = self.nonce_provider.next()
        signature = sign(
            self.credentials.secret_key,
            canonical_message(nonce, method, path, body),
        )
        logger.debug("Signed {} {} with nonce={}", method, path, nonce)
        return {
            "Authorization": f"Bearer {self.credentials.api_key}",
            "Taur-Nonce": str(nonce),
            "Taur-Signature": signature,
        }
