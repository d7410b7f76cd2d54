from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

import httpx

LookupMethod = Literal["GET", "HEAD"]


@dataclass(frozen=True)
class HttpResult:
    """
    Outcome of one reference-service call.

    ``status_code`` is None when the request never got an answer; the resolver
    treats that as a connection failure. Any answer, 2xx or not, is data.
    """

    ok: bool
    status_code: int | None
    detail: dict[str, Any] = field(default_factory=dict)
    error_code: str | None = None
    error_message: str | None = None
    elapsed_ms: int | None = None

    @property
    def transport_failed(self) -> bool:
        return self.status_code is None


def _decode(resp: httpx.Response, *, limit: int) -> dict[str, Any]:
    if not resp.content:
        return {}
    ctype = (resp.headers.get("content-type") or "").lower()
    if "json" in ctype:
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            return body
        if body is not None:
            return {"data": body}
    text = resp.text
    if len(text) > limit:
        text = f"{text[:limit]}...(truncated, {len(text)} chars)"
    return {"raw": text}


class ReferenceHttpClient:
    """
    Pooled client for the utility, subscription, oauth, store and member services.

    No retries and no raising on status: lookups are idempotent and a miss is
    an ordinary answer, so the caller decides what each outcome means.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float = 20.0,
        max_response_body_chars: int = 20_000,
        default_headers: Mapping[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._max_body = max_response_body_chars
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"Accept": "application/json", **dict(default_headers or {})},
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request_json(
        self,
        *,
        method: LookupMethod,
        url: str,
        params: Mapping[str, str] | None = None,
        request_id: str | None = None,
    ) -> HttpResult:
        headers = {"X-Request-Id": request_id} if request_id else None
        started = time.perf_counter()
        try:
            resp = await self._client.request(method, url, params=dict(params or {}), headers=headers)
        except httpx.TimeoutException as e:
            return HttpResult(ok=False, status_code=None, error_code="TIMEOUT", error_message=str(e))
        except httpx.RequestError as e:
            # refused connections, DNS and TLS failures
            return HttpResult(ok=False, status_code=None, error_code="REQUEST_ERROR", error_message=str(e))

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        detail = {} if method == "HEAD" else _decode(resp, limit=self._max_body)
        if resp.is_success:
            return HttpResult(ok=True, status_code=resp.status_code, detail=detail, elapsed_ms=elapsed_ms)
        return HttpResult(
            ok=False,
            status_code=resp.status_code,
            detail=detail,
            error_code=f"HTTP_{resp.status_code}",
            error_message=f"HTTP {resp.status_code}",
            elapsed_ms=elapsed_ms,
        )

    async def get_json(self, *, url: str, params: Mapping[str, str] | None = None) -> HttpResult:
        return await self.request_json(method="GET", url=url, params=params)

    async def head(self, *, url: str, params: Mapping[str, str] | None = None) -> HttpResult:
        return await self.request_json(method="HEAD", url=url, params=params)
