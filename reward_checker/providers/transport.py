"""
Async HTTP transports used by the provider adapters.

HttpTransport performs one request with httpx and returns decoded JSON.
CorsRelayTransport decorates another transport: it rewrites the request URL
to <relay_base><original_url> and unwraps {"contents": ...} envelopes that
some relays put around the upstream body.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

import httpx

from .errors import TransportError

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_S = 30.0


@runtime_checkable
class Transport(Protocol):
    """Anything that can perform one JSON request and return the decoded body."""

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> Any: ...


class HttpTransport:
    """
    httpx-backed transport.

    Pass a shared AsyncClient to reuse connections (and to inject
    httpx.MockTransport in tests); otherwise a short-lived client is opened
    per request.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = HTTP_TIMEOUT_S,
    ) -> None:
        self._client = client
        self._timeout_s = timeout_s

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> Any:
        logger.debug("%s %s", method, url)
        kwargs: Dict[str, Any] = {"headers": dict(headers or {}), "params": params}
        if body is not None:
            kwargs["json"] = body
        try:
            if self._client is not None:
                resp = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self._timeout_s) as client:
                    resp = await client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"Network error: {type(exc).__name__}: {exc}") from exc

        if not resp.is_success:
            raise TransportError.from_status(resp.status_code, resp.reason_phrase)
        try:
            return resp.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON response (HTTP {resp.status_code})") from exc


def unwrap_relay_envelope(raw: Any) -> Any:
    """Return the upstream body from a {"contents": <json string or object>} envelope."""
    if not isinstance(raw, dict) or "contents" not in raw:
        return raw
    contents = raw["contents"]
    if isinstance(contents, (str, bytes)):
        try:
            return json.loads(contents)
        except ValueError as exc:
            raise TransportError("Relay returned contents that are not JSON") from exc
    return contents


class CorsRelayTransport:
    """Route requests through a public forwarding relay."""

    def __init__(self, inner: Transport, relay_base: str) -> None:
        self._inner = inner
        self._relay_base = relay_base

    @property
    def relay_base(self) -> str:
        return self._relay_base

    def rewrite_url(self, url: str) -> str:
        return f"{self._relay_base}{url}"

    async def request_json(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
        params: Optional[Mapping[str, str]] = None,
    ) -> Any:
        raw = await self._inner.request_json(
            method, self.rewrite_url(url), headers=headers, body=body, params=params
        )
        return unwrap_relay_envelope(raw)
