"""Tests for HttpTransport, relay envelope unwrapping and URL rewriting."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from reward_checker.providers.errors import TransportError
from reward_checker.providers.transport import (
    CorsRelayTransport,
    HttpTransport,
    Transport,
    unwrap_relay_envelope,
)


def _http(handler) -> HttpTransport:
    return HttpTransport(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestUnwrapRelayEnvelope:
    def test_string_contents_are_decoded(self):
        assert unwrap_relay_envelope({"contents": '{"a": 1}'}) == {"a": 1}

    def test_object_contents_pass_through(self):
        assert unwrap_relay_envelope({"contents": {"a": 1}}) == {"a": 1}

    def test_plain_body_untouched(self):
        assert unwrap_relay_envelope({"rewards": {}}) == {"rewards": {}}
        assert unwrap_relay_envelope([1, 2]) == [1, 2]

    def test_non_json_contents(self):
        with pytest.raises(TransportError, match="not JSON"):
            unwrap_relay_envelope({"contents": "<html>blocked</html>"})


class TestHttpTransport:
    def test_satisfies_protocol(self):
        assert isinstance(HttpTransport(), Transport)
        assert isinstance(CorsRelayTransport(HttpTransport(), "https://r/"), Transport)

    def test_post_json_body_and_headers(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        out = asyncio.run(
            _http(handler).request_json("POST", "https://api.test/x", headers={"X-Test": "1"}, body={"k": "v"})
        )
        assert out == {"ok": True}
        assert json.loads(seen[0].content) == {"k": "v"}
        assert seen[0].headers["x-test"] == "1"

    def test_status_error(self):
        with pytest.raises(TransportError, match=r"^HTTP 404: Not Found$") as exc_info:
            asyncio.run(_http(lambda r: httpx.Response(404)).request_json("GET", "https://api.test/x"))
        assert exc_info.value.status_code == 404

    def test_invalid_json(self):
        handler = lambda r: httpx.Response(200, content=b"not json")  # noqa: E731
        with pytest.raises(TransportError, match="Invalid JSON response"):
            asyncio.run(_http(handler).request_json("GET", "https://api.test/x"))

    def test_network_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError, match="^Network error: ReadTimeout"):
            asyncio.run(_http(handler).request_json("GET", "https://api.test/x"))


class TestCorsRelayTransport:
    def test_rewrites_url_and_unwraps(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json={"contents": json.dumps({"x": 1})})

        relay = CorsRelayTransport(_http(handler), "https://relay.test/")
        out = asyncio.run(relay.request_json("POST", "https://api.test/path", body={}))
        assert out == {"x": 1}
        assert seen == ["https://relay.test/https://api.test/path"]

    def test_rewrite_url(self):
        relay = CorsRelayTransport(HttpTransport(), "https://relay.test/")
        assert relay.relay_base == "https://relay.test/"
        assert relay.rewrite_url("https://a.b/c") == "https://relay.test/https://a.b/c"
