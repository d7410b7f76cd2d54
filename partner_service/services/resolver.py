from __future__ import annotations

import json
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import quote

from partner_service.core import consts
from partner_service.core.config import Settings
from partner_service.core.errors import CacheError, ServiceConnectionError
from partner_service.schemas.partner import StoreData
from partner_service.services.cache import ReferenceCache
from partner_service.services.http_client import HttpResult, ReferenceHttpClient

log = logging.getLogger(__name__)

_MISS = object()


def _dig(detail: Any, *path: str | int) -> Any:
    cur = detail
    for step in path:
        if isinstance(step, int):
            if not isinstance(cur, list) or len(cur) <= step:
                return None
            cur = cur[step]
        else:
            if not isinstance(cur, dict):
                return None
            cur = cur.get(step)
        if cur is None:
            return None
    return cur


def _segment(value: Any) -> str:
    # one path segment; "/", "?" and "#" must not reshape the URL
    return quote(str(value), safe="")


def _as_int(value: Any) -> int | None:
    try:
        n = int(value)
    except (TypeError, ValueError):
        return None
    return n or None


def _as_str(value: Any) -> str | None:
    if value is None:
        return None
    s = str(value)
    return s or None


class ReferenceResolver:
    """
    Read-through resolution of human-readable reference values to ids.

    A miss (non-2xx answer, empty payload) is a normal outcome and comes back
    as None/False. Transport failures raise ServiceConnectionError and cache
    read failures raise CacheError; both abort the calling operation.
    """

    def __init__(self, *, cache: ReferenceCache, http: ReferenceHttpClient, settings: Settings):
        self._cache = cache
        self._http = http
        self._ttl = settings.cache_ttl_seconds
        self._utility = settings.utility_service_url.rstrip("/")
        self._subscription = settings.subscription_service_url.rstrip("/")
        self._oauth = settings.oauth_service_url.rstrip("/")
        self._store = settings.store_service_url.rstrip("/")
        self._member = settings.member_service_url.rstrip("/")

    async def _cached(self, key: str) -> Any:
        raw = await self._cache.get(key)
        if raw is None:
            return _MISS
        try:
            return json.loads(raw)
        except ValueError:
            log.warning("ignoring undecodable cache entry %s", key)
            return _MISS

    async def _remember(self, key: str, value: Any) -> None:
        try:
            await self._cache.set(key, json.dumps(value), ttl_seconds=self._ttl)
        except CacheError as e:
            log.warning("unable to populate reference cache: %s", e)

    async def _call(
        self,
        service: str,
        fetch: Callable[[], Awaitable[HttpResult]],
    ) -> HttpResult:
        res = await fetch()
        if res.transport_failed:
            log.error("failed to connect %s service: %s", service, res.error_message)
            raise ServiceConnectionError(service, res.error_message)
        return res

    async def _read_through(
        self,
        key: str,
        service: str,
        fetch: Callable[[], Awaitable[HttpResult]],
        extract: Callable[[HttpResult], Any],
        *,
        cache_negative: bool = False,
    ) -> Any:
        hit = await self._cached(key)
        if hit is not _MISS:
            return hit

        res = await self._call(service, fetch)
        value = extract(res) if res.ok else None
        if value is not None or cache_negative:
            await self._remember(key, value)
        return value

    # Existence checks

    async def country_exists(self, iso: str) -> bool:
        url = f"{self._utility}/countries/exists"
        value = await self._read_through(
            consts.COUNTRY_EXISTS_CACHE_KEY + iso,
            "country",
            lambda: self._http.get_json(url=url, params={"iso": iso}),
            lambda r: bool(_dig(r.detail, "data", "exists")),
            cache_negative=True,
        )
        return bool(value)

    async def state_exists(self, country: str, state: str) -> bool:
        url = f"{self._utility}/countries/{_segment(country)}/states/{_segment(state)}"
        value = await self._read_through(
            f"{consts.STATE_EXISTS_CACHE_KEY}{country}_{state}",
            "state",
            lambda: self._http.head(url=url),
            lambda r: True,
            cache_negative=True,
        )
        return bool(value)

    async def language_exists(self, code: str) -> bool:
        url = f"{self._utility}/languages/exists/{_segment(code)}"
        value = await self._read_through(
            consts.LANGUAGE_EXISTS_CACHE_KEY + code,
            "language",
            lambda: self._http.head(url=url),
            lambda r: True,
            cache_negative=True,
        )
        return bool(value)

    async def member_exists(self, member_id: str, partner_id: str) -> bool:
        res = await self._call(
            "member",
            lambda: self._http.get_json(
                url=f"{self._member}/members/{_segment(member_id)}",
                params={"partner_id": partner_id},
            ),
        )
        return res.ok

    # Id resolution

    async def currency_id(self, iso: str) -> int | None:
        url = f"{self._utility}/currencies/exists/{_segment(iso)}"
        return await self._read_through(
            consts.CURRENCY_ID_CACHE_KEY + iso,
            "currency",
            lambda: self._http.get_json(url=url),
            lambda r: _as_int(_dig(r.detail, "data", "id")),
        )

    async def lookup_id(self, lookup_type: str, value: str) -> int | None:
        url = f"{self._utility}/lookup/type/{_segment(lookup_type)}"
        return await self._read_through(
            f"{consts.LOOKUP_ID_CACHE_KEY}{lookup_type}_{value}",
            "lookup",
            lambda: self._http.get_json(url=url, params={"value": value}),
            lambda r: _as_int(_dig(r.detail, "data", 0, "id")),
        )

    async def payment_gateway_id(self, name: str) -> str | None:
        url = f"{self._utility}/payment_gateway/all"
        return await self._read_through(
            consts.PAYMENT_GATEWAY_ID_CACHE_KEY + name,
            "payment gateway",
            lambda: self._http.get_json(url=url, params={"name": name}),
            lambda r: _as_str(_dig(r.detail, "data", "records", 0, "id")),
        )

    async def subscription_duration_id(self, name: str) -> int | None:
        url = f"{self._subscription}/subscriptions/durations"
        return await self._read_through(
            consts.SUB_DURATION_ID_CACHE_KEY + name,
            "subscription",
            lambda: self._http.get_json(url=url, params={"name": name}),
            lambda r: _as_int(_dig(r.detail, "data", "records", 0, "id")),
        )

    async def theme_name(self, theme_id: int) -> str | None:
        url = f"{self._utility}/theme/{theme_id}"
        return await self._read_through(
            f"{consts.THEME_CACHE_KEY}{theme_id}",
            "theme",
            lambda: self._http.get_json(url=url),
            lambda r: _as_str(_dig(r.detail, "data", "name")),
        )

    async def oauth_provider_id(self, name: str) -> str | None:
        url = f"{self._oauth}/oauth/partner"
        return await self._read_through(
            consts.OAUTH_PROVIDER_CACHE_KEY + name,
            "oauth",
            lambda: self._http.get_json(url=url, params={"provider": name}),
            lambda r: _as_str(_dig(r.detail, "data", "provider_id")),
        )

    async def stores(self) -> list[StoreData]:
        url = f"{self._store}/stores"
        rows = await self._read_through(
            consts.STORE_CACHE_KEY,
            "store",
            lambda: self._http.get_json(url=url),
            lambda r: _dig(r.detail, "data") or [],
        )
        return [StoreData.model_validate(row) for row in rows or []]
