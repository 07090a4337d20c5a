from __future__ import annotations

"""
Async HTTP client for the Cosmos legacy REST (LCD) interface.

- Built on httpx.AsyncClient; pass `transport=` (e.g. httpx.MockTransport) in tests.
- Network-agnostic: callers pass full URLs built from `NetworkConfig.rest(...)`.
- Retries idempotent GETs on transient transport failures and 429/502/503/504.
  POSTs are sent exactly once.
- Every request is bounded by `SDKConfig.request_timeout`; a timeout surfaces
  as `TransportError`.

Example:
    from thorchain_client.config import NetworkConfig, SDKConfig
    from thorchain_client.rpc.http import RestClient

    net = NetworkConfig.for_network("testnet")
    async with RestClient(SDKConfig()) as rest:
        resp = await rest.get(net.rest("/auth/accounts/tthor1..."))
        print(resp.status, resp.data)
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from ..config import SDKConfig
from ..errors import TransportError
from ..utils.retry import RetryError, aretry_call

log = logging.getLogger(__name__)

__all__ = ["RestClient", "RestResponse"]


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


@dataclass(frozen=True)
class RestResponse:
    """A non-retriable HTTP response. `data` is the decoded JSON body, or None if it was not JSON."""

    status: int
    data: Any
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RestClient:
    """Thin async wrapper that turns httpx failures into `TransportError`."""

    def __init__(
        self,
        config: Optional[SDKConfig] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config or SDKConfig()
        self._client = httpx.AsyncClient(
            timeout=self.config.request_timeout,
            headers=self.config.http_headers(),
            transport=transport,
        )

    # --- context manager -------------------------------------------------

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- public API ------------------------------------------------------

    async def get(self, url: str, params: Optional[Mapping[str, str]] = None) -> RestResponse:
        """GET with retries. Raises TransportError once attempts are exhausted."""

        def _on_retry(attempt: int, exc: BaseException, delay: float) -> None:
            log.debug("GET %s failed (attempt %d): %s; retrying in %.2fs", url, attempt, exc, delay)

        try:
            return await aretry_call(
                self._send_once,
                "GET",
                url,
                params=dict(params) if params else None,
                retries=self.config.max_retries,
                base=self.config.backoff_base,
                max_delay=self.config.max_backoff,
                exceptions=TransportError,
                on_retry=_on_retry,
            )
        except RetryError as e:
            raise e.last_exception from None

    async def post(self, url: str, body: Any) -> RestResponse:
        """POST once. Not retried: submitting a transaction is not idempotent."""
        return await self._send_once("POST", url, body=body)

    # --- internals -------------------------------------------------------

    async def _send_once(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> RestResponse:
        content = None
        if body is not None:
            content = json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        try:
            r = await self._client.request(method, url, params=params, content=content)
        except httpx.TimeoutException as e:
            raise TransportError("Request timed out", url=url, data=str(e)) from e
        except httpx.HTTPError as e:
            raise TransportError("Network error", url=url, data=str(e)) from e

        if _is_retriable_http(r.status_code):
            raise TransportError(f"HTTP {r.status_code}", url=url, http_status=r.status_code, data=r.text[:256])

        try:
            data = r.json()
        except ValueError as e:
            if 200 <= r.status_code < 300:
                raise TransportError(
                    "Non-JSON response from REST server",
                    url=url,
                    http_status=r.status_code,
                    data=r.text[:256],
                ) from e
            data = None
        return RestResponse(status=r.status_code, data=data, text=r.text[:1024])
