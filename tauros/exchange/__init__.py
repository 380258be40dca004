"""Exchange connectivity module."""

from .auth import Credentials, NonceProvider
from .client import TaurosClient
from .errors import (
    BusinessError,
    ConfigurationError,
    ProtocolError,
    SecurityError,
    TaurosError,
    TransportError,
)
from .request import RequestSpec

__all__ = [
    "BusinessError",
    "ConfigurationError",
    "Credentials",
    "NonceProvider",
    "ProtocolError",
    "RequestSpec",
    "SecurityError",
    "TaurosClient",
    "TaurosError",
    "TransportError",
]
