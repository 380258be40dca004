"""Tests for response envelope normalization."""

import json

import pytest

from tauros.exchange.errors import BusinessError, ProtocolError, SecurityError
from tauros.exchange.response import classify_failure, is_webhook_path, normalize


def _body(doc: object) -> bytes:
    return json.dumps(doc).encode()


class TestEnvelopeVersions:
    """Payload field selection per API version."""

    def test_v1_payload_under_data(self) -> None:
        raw = _body({"success": True, "msg": "", "data": {"wallets": [1, 2]}, "payload": "x"})
        assert normalize(1, "data/listbalances", raw, 200) == {"wallets": [1, 2]}

    def test_v2_payload_under_payload(self) -> None:
        raw = _body({"success": True, "msg": None, "data": "x", "payload": [{"name": "BTC-MXN"}]})
        assert normalize(2, "trading/markets", raw, 200) == [{"name": "BTC-MXN"}]

    def test_missing_payload_is_none(self) -> None:
        assert normalize(1, "trading/closeorder", _body({"success": True}), 200) is None


class TestWebhookFamily:
    """Webhook endpoints answer without an envelope."""

    def test_empty_body_is_success_with_empty_object(self) -> None:
        assert normalize(2, "webhooks/webhooks/42", b"", 204) == {}

    def test_bare_payload_wrapped(self) -> None:
        assert normalize(2, "webhooks/webhooks", b'{"id":42}', 201) == {"id": 42}

    def test_bare_list_wrapped(self) -> None:
        assert normalize(2, "webhooks/webhooks", b'["Limit reached"]', 400) == ["Limit reached"]

    def test_enveloped_webhook_response_unwrapped(self) -> None:
        """An envelope sent by a webhook endpoint is not wrapped twice."""
        raw = b'{"success":true,"payload":{"id":42}}'
        assert normalize(2, "webhooks/webhooks", raw, 201) == {"id": 42}

    def test_enveloped_webhook_failure_raises(self) -> None:
        raw = _body({"success": False, "msg": "Invalid token."})
        with pytest.raises(SecurityError):
            normalize(2, "webhooks/webhooks", raw, 401)

    def test_bare_object_with_other_keys_wrapped(self) -> None:
        raw = _body({"count": 0, "results": []})
        assert normalize(2, "webhooks/webhooks", raw, 200) == {"count": 0, "results": []}

    def test_malformed_webhook_body(self) -> None:
        with pytest.raises(ProtocolError):
            normalize(2, "webhooks/webhooks", b"<html>oops</html>", 502)

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("webhooks/webhooks", True),
            ("webhooks/webhooks/3", True),
            ("trading/markets", False),
            ("data/webhooks", False),
        ],
    )
    def test_is_webhook_path(self, path: str, expected: bool) -> None:
        assert is_webhook_path(path) is expected


class TestFailures:
    """success=false and malformed responses."""

    def test_invalid_token_is_security_error(self) -> None:
        raw = _body({"success": False, "msg": "Invalid token."})
        with pytest.raises(SecurityError, match="Invalid token") as exc_info:
            normalize(1, "data/listbalances", raw, 401)
        assert exc_info.value.status_code == 401

    def test_bad_signature_is_security_error(self) -> None:
        raw = _body({"success": False, "msg": "Invalid signature"})
        with pytest.raises(SecurityError):
            normalize(2, "wallets/inner-transfer", raw, 403)

    def test_insufficient_balance_is_business_error(self) -> None:
        raw = _body({"success": False, "msg": "Insufficient balance"})
        with pytest.raises(BusinessError, match="Insufficient balance") as exc_info:
            normalize(1, "trading/placeorder", raw, 400)
        assert not isinstance(exc_info.value, SecurityError)

    def test_empty_message_falls_back_to_body(self) -> None:
        raw = _body({"success": False, "msg": ""})
        with pytest.raises(BusinessError) as exc_info:
            normalize(1, "trading/closeorder", raw, 400)
        assert str(exc_info.value) == raw.decode()

    def test_structured_message_serialized(self) -> None:
        raw = _body({"success": False, "msg": {"amount": ["too small"]}})
        with pytest.raises(BusinessError, match="too small"):
            normalize(1, "trading/placeorder", raw, 400)

    def test_missing_success_is_failure(self) -> None:
        with pytest.raises(BusinessError):
            normalize(2, "coins", _body({"detail": "Not found."}), 404)

    @pytest.mark.parametrize("flag", ["false", "true", 1, 0, None])
    def test_non_boolean_success_is_protocol_error(self, flag: object) -> None:
        """The success flag must be a JSON boolean."""
        raw = _body({"success": flag, "msg": "Insufficient balance"})
        with pytest.raises(ProtocolError) as exc_info:
            normalize(1, "trading/placeorder", raw, 400)
        assert exc_info.value.status_code == 400

    def test_non_boolean_success_on_webhook_envelope(self) -> None:
        with pytest.raises(ProtocolError):
            normalize(2, "webhooks/webhooks", _body({"success": "false"}), 400)

    def test_malformed_json_is_protocol_error(self) -> None:
        with pytest.raises(ProtocolError) as exc_info:
            normalize(2, "coins", b"Internal Server Error", 500)
        assert exc_info.value.status_code == 500
        assert exc_info.value.body == b"Internal Server Error"
        assert "500" in str(exc_info.value)

    def test_non_object_is_protocol_error(self) -> None:
        with pytest.raises(ProtocolError):
            normalize(2, "coins", b"[1, 2]", 200)


class TestClassifyFailure:
    """Tests for classify_failure."""

    @pytest.mark.parametrize(
        "message",
        ["Invalid token.", "invalid TOKEN", "Signature mismatch", "bad signature"],
    )
    def test_security(self, message: str) -> None:
        assert isinstance(classify_failure(message), SecurityError)

    @pytest.mark.parametrize("message", ["Insufficient balance", "Limit reached"])
    def test_business(self, message: str) -> None:
        error = classify_failure(message, 400)
        assert type(error) is BusinessError
        assert error.status_code == 400
