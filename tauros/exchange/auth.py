"""Credentials, nonces and request signing."""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from .errors import ConfigurationError

EMPTY_BODY = b"{}"


@dataclass(slots=True, frozen=True)
class Credentials:
    """API key and base64 secret, decoded once at construction."""

    api_key: str
    api_secret: str = field(repr=False)
    secret_key: bytes = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError("API key is empty")
        try:
            decoded = base64.b64decode(self.api_secret, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ConfigurationError(f"API secret is not valid base64: {e}") from e
        if not decoded:
            raise ConfigurationError("API secret is empty")
        object.__setattr__(self, "secret_key", decoded)


class NonceProvider:
    """Millisecond wall-clock nonces that never go backwards."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            now = int(self._clock() * 1000)
            # a clock stepping back repeats the last nonce instead
            self._last = max(self._last, now)
            return self._last


def canonical_message(nonce: int, method: str, path: str, body: bytes) -> bytes:
    """Byte sequence the server recomputes to verify a request.

    ``nonce + METHOD + path + body``, where an empty body counts as ``{}``.
    ``path`` is used exactly as given, trailing slash included.
    """
    return b"".join(
        (
            str(nonce).encode("ascii"),
            method.upper().encode("ascii"),
            path.encode("utf-8"),
            body or EMPTY_BODY,
        )
    )


def sign(secret_key: bytes, message: bytes) -> str:
    """HMAC-SHA512 over the SHA-256 digest of ``message``, base64 encoded."""
    digest = hashlib.sha256(message).digest()
    mac = hmac.new(secret_key, digest, hashlib.sha512).digest()
    return base64.b64encode(mac).decode("ascii")
