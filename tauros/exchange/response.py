"""Unwrapping of the exchange's response envelopes."""

from __future__ import annotations

import json
from typing import Any

from loguru import logger

from .errors import BusinessError, ProtocolError, SecurityError

WEBHOOK_FAMILY = "webhooks"
SECURITY_MARKERS = ("invalid token", "signature")


def is_webhook_path(path: str) -> bool:
    """Webhook endpoints answer with a bare payload instead of an envelope."""
    return path.split("/", 1)[0] == WEBHOOK_FAMILY


def classify_failure(message: str, status_code: int | None = None) -> BusinessError:
    """Return the error matching a failure message, without raising it."""
    lowered = message.lower()
    if any(marker in lowered for marker in SECURITY_MARKERS):
        return SecurityError(message, status_code)
    return BusinessError(message, status_code)


def _message_text(message: Any, raw_body: bytes) -> str:
    if message in (None, "", [], {}):
        return raw_body.decode("utf-8", errors="replace")
    if isinstance(message, str):
        return message
    return json.dumps(message)


def normalize(version: int, path: str, raw_body: bytes, status_code: int) -> Any:
    """Return the payload of a response or raise a classified error.

    Version 1 envelopes carry the payload under ``data``, version 2 and the
    synthesized webhook envelope under ``payload``. The selected value is
    returned as decoded JSON without further typing.
    """
    webhook = is_webhook_path(path)
    body = raw_body
    if webhook:
        # empty body on some successful deletes
        body = raw_body.strip() or b"{}"

    try:
        envelope = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.error("Malformed response from {} (status {}): {}", path, status_code, e)
        msg = f"Unparseable response (status {status_code}): {raw_body!r}"
        raise ProtocolError(msg, status_code, raw_body) from e

    # webhook endpoints usually answer bare; an envelope they do send is kept
    if webhook and not (isinstance(envelope, dict) and "success" in envelope):
        envelope = {"success": True, "payload": envelope}

    if not isinstance(envelope, dict):
        logger.error("Response from {} is not an envelope (status {})", path, status_code)
        msg = f"Unexpected response shape (status {status_code}): {raw_body!r}"
        raise ProtocolError(msg, status_code, raw_body)

    success = envelope.get("success", False)
    if not isinstance(success, bool):
        logger.error("Response from {} has a non-boolean success flag", path)
        msg = f"Invalid success flag {success!r} (status {status_code}): {raw_body!r}"
        raise ProtocolError(msg, status_code, raw_body)

    if success is not True:
        error = classify_failure(
            _message_text(envelope.get("msg"), raw_body), status_code
        )
        if isinstance(error, SecurityError):
            logger.error("Authentication rejected on {}: {}", path, error)
        else:
            logger.warning("Request to {} failed: {}", path, error)
        raise error

    if version == 1:
        return envelope.get("data")
    return envelope.get("payload")
