"""Tests for request header helpers and context binding."""

import pytest
from starlette.requests import Request

from blog.core.context import clear_context, get_request_id, set_request_id
from blog.core.middleware import client_ip, trace_id_from


def _request(headers: dict[str, str], peer: str = "10.0.0.9") -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/",
            "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
            "client": (peer, 5555),
        }
    )


class TestClientIp:
    def test_first_forwarded_hop(self) -> None:
        request = _request({"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
        assert client_ip(request) == "203.0.113.7"

    def test_real_ip_header(self) -> None:
        assert client_ip(_request({"X-Real-IP": "198.51.100.2"})) == "198.51.100.2"

    def test_peer_address(self) -> None:
        assert client_ip(_request({})) == "10.0.0.9"


class TestTraceId:
    def test_explicit_header_wins(self) -> None:
        request = _request(
            {"X-Trace-ID": "abc", "traceparent": "00-0af7651916cd43dd-b7ad6b71-01"}
        )
        assert trace_id_from(request) == "abc"

    def test_traceparent(self) -> None:
        request = _request({"traceparent": "00-0af7651916cd43dd-b7ad6b71-01"})
        assert trace_id_from(request) == "0af7651916cd43dd"

    @pytest.mark.parametrize("value", ["", "garbage", "00-only-three"])
    def test_malformed_traceparent(self, value: str) -> None:
        assert trace_id_from(_request({"traceparent": value})) is None


class TestContext:
    def test_generates_request_id(self) -> None:
        rid = set_request_id(None)
        assert rid
        assert get_request_id() == rid
        clear_context()
        assert get_request_id() is None
