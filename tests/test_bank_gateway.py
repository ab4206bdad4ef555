"""
Tests for the acquiring bank adapter, driven through httpx.MockTransport.
"""
import json
from unittest.mock import patch

import httpx
import pytest

from payment_gateway.bank_gateway import (
    BankOutcome,
    BankOutcomeKind,
    HttpBankGateway,
    format_expiry_date,
)

BANK_URL = "http://bank.test"


def make_gateway(handler, base_url=BANK_URL):
    return HttpBankGateway(base_url, timeout=5.0, transport=httpx.MockTransport(handler))


def authorize(gateway, **overrides):
    fields = {
        "card_number": "2222405343248877",
        "expiry_month": 4,
        "expiry_year": 2025,
        "currency": "GBP",
        "amount": 100,
        "cvv": "123",
    }
    fields.update(overrides)
    return gateway.authorize(**fields)


class TestFormatExpiryDate:
    """Test MM/YYYY formatting of the expiry date"""

    @pytest.mark.parametrize("month, year, expected", [
        (1, 2025, "01/2025"),
        (9, 2030, "09/2030"),
        (12, 2025, "12/2025"),
    ])
    def test_format(self, month, year, expected):
        assert format_expiry_date(month, year) == expected


class TestHttpBankGatewayRequest:
    """Test the request sent to the bank"""

    def test_request_shape(self):
        """Test path, headers and JSON body of the bank request"""
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(200, json={"authorized": True, "authorization_code": "abc"})

        authorize(make_gateway(handler))

        request = captured["request"]
        assert request.method == "POST"
        assert str(request.url) == "http://bank.test/payments"
        assert request.headers["accept"] == "application/json"
        assert json.loads(request.content) == {
            "card_number": "2222405343248877",
            "expiry_date": "04/2025",
            "currency": "GBP",
            "amount": 100,
            "cvv": "123",
        }

    def test_base_url_with_path(self):
        """Test that payments is appended to a base URL that has a path"""
        urls = []

        def handler(request: httpx.Request) -> httpx.Response:
            urls.append(str(request.url))
            return httpx.Response(200, json={"authorized": False, "authorization_code": None})

        authorize(make_gateway(handler, base_url="http://bank.test/api/"))
        assert urls == ["http://bank.test/api/payments"]


class TestHttpBankGatewayOutcome:
    """Test how bank responses are classified"""

    def test_authorized(self):
        def handler(request):
            return httpx.Response(200, json={"authorized": True, "authorization_code": "AUTH123"})

        outcome = authorize(make_gateway(handler))
        assert outcome == BankOutcome.authorized("AUTH123")

    def test_declined(self):
        def handler(request):
            return httpx.Response(200, json={"authorized": False, "authorization_code": None})

        outcome = authorize(make_gateway(handler))
        assert outcome.kind is BankOutcomeKind.DECLINED
        assert outcome.authorization_code is None

    @pytest.mark.parametrize("status_code", [400, 404, 500, 503])
    def test_error_status_is_unreachable(self, status_code):
        def handler(request):
            return httpx.Response(status_code, json={"error_message": "Not all required properties were sent"})

        assert authorize(make_gateway(handler)) == BankOutcome.unreachable()

    def test_non_json_body_is_unreachable(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>maintenance</html>")

        assert authorize(make_gateway(handler)) == BankOutcome.unreachable()

    def test_missing_authorized_flag_is_unreachable(self):
        def handler(request):
            return httpx.Response(200, json={"error": "Invalid request format"})

        assert authorize(make_gateway(handler)) == BankOutcome.unreachable()

    @pytest.mark.parametrize("error", [
        httpx.ConnectError("Connection refused"),
        httpx.ReadTimeout("Timed out"),
    ])
    def test_transport_error_is_unreachable(self, error):
        def handler(request):
            raise error

        assert authorize(make_gateway(handler)) == BankOutcome.unreachable()

    @patch("payment_gateway.bank_gateway.httpx.Client.post")
    def test_unexpected_exception_is_unreachable(self, mock_post):
        """Test that any exception raised by the HTTP call is not propagated"""
        mock_post.side_effect = Exception("Connection failed")
        gateway = HttpBankGateway(BANK_URL)
        assert authorize(gateway) == BankOutcome.unreachable()
        gateway.close()
