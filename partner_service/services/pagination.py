"""
Listing parameter validation and page metadata.

Both validators normalize their params in place (defaults for zero page and
limit, default sort) and record violations on the supplied report. A limit
above ``MAX_LIMIT`` is not a field violation: it raises immediately.
"""

from __future__ import annotations

from partner_service.core import consts
from partner_service.core.errors import MaximumRequestError
from partner_service.schemas.listing import ListParams, MetaData, QueryParams
from partner_service.services.violations import ViolationReport


def _split(value: str) -> list[str]:
    return [part.strip() for part in value.split(",")]


def _check_keys(report: ViolationReport, keys: list[str], allowed: frozenset[str]) -> None:
    for key in keys:
        if key not in allowed:
            report.invalid(consts.QUERY_KEY)
            break


def _check_page_and_limit(report: ViolationReport, params: ListParams | QueryParams) -> None:
    if params.page == 0:
        params.page = consts.PAGE_DEFAULT
    if params.limit == 0:
        params.limit = consts.LIMIT_DEFAULT

    if params.page < 0:
        report.invalid(consts.PAGE_KEY)
    if params.limit < 0:
        report.invalid(consts.LIMIT_KEY)
    elif params.limit > consts.MAX_LIMIT:
        raise MaximumRequestError(params.limit, consts.MAX_LIMIT)


def validate_list_params(params: ListParams, report: ViolationReport) -> None:
    _check_keys(report, params.keys, consts.PARTNER_LIST_KEYS)
    _check_page_and_limit(report, params)

    if not params.sort:
        params.sort = consts.NAME_KEY
    for field in _split(params.sort):
        if field not in consts.PARTNER_SORT_FIELDS:
            report.invalid(consts.SORT_KEY)
            break

    if params.order:
        for order in _split(params.order):
            if order.lower() not in consts.SORT_ORDERS:
                report.invalid(consts.ORDER_KEY)
                break

    if params.status and params.status.lower() not in consts.STATUS_VALUES:
        report.invalid(consts.STATUS_KEY)


def validate_query_params(params: QueryParams, report: ViolationReport) -> None:
    _check_keys(report, params.keys, consts.PARTNER_QUERY_KEYS)
    _check_page_and_limit(report, params)

    if not params.sort:
        params.sort = consts.NAME_KEY
    if params.sort not in consts.QUERY_SORT_FIELDS:
        report.invalid(consts.SORT_KEY)

    if params.order and params.order.lower() not in consts.SORT_ORDERS:
        report.invalid(consts.ORDER_KEY)


def is_past_last_page(page: int, limit: int, count: int) -> bool:
    """True when the requested page starts beyond the last record."""
    return (page * limit) - count >= limit


def build_metadata(page: int, limit: int, total: int) -> MetaData | None:
    if total < 1:
        return None
    return MetaData(
        current_page=page,
        per_page=limit,
        total=total,
        next=page + 1 if page * limit < total else 0,
        prev=page - 1 if page > 1 else 0,
    )
