"""
Field rule ladders shared by the create and update engines.

A ladder stops at the first failing rung, in this order: required, format,
length, uniqueness. Uniqueness is only consulted for values that passed
every other rung.
"""

from __future__ import annotations

from typing import Awaitable, Callable

from partner_service.core import consts
from partner_service.schemas.partner import PaymentGateway
from partner_service.services.resolver import ReferenceResolver
from partner_service.services.validators import (
    in_range,
    is_member,
    is_valid_email,
    max_length,
    non_empty,
)
from partner_service.services.violations import ViolationReport

UniqueCheck = Callable[[str, str], Awaitable[bool]]


async def check_text(
    report: ViolationReport,
    key: str,
    value: str | None,
    *,
    required: bool = False,
    valid: Callable[[str], bool] | None = None,
    limit: int | None = None,
    unique: UniqueCheck | None = None,
    trim: bool = False,
) -> bool:
    """
    Run the ladder for one text field.

    Returns True when the value is clean. An empty optional value is clean.
    """
    if not non_empty(value):
        if required:
            report.required(key)
            return False
        return True
    assert value is not None

    if valid is not None and not valid(value):
        report.invalid(key)
        return False

    measured = value.strip() if trim else value
    if limit is not None and not max_length(measured, limit):
        report.limit_exceeded(key)
        return False

    if unique is not None and not await unique(key, measured):
        report.already_exists(key)
        return False
    return True


async def check_email(
    report: ViolationReport,
    key: str,
    value: str | None,
    *,
    unique: UniqueCheck,
) -> bool:
    return await check_text(
        report,
        key,
        value,
        required=True,
        valid=is_valid_email,
        limit=consts.EMAIL_MAX_LENGTH,
        unique=unique,
    )


def check_bounds(report: ViolationReport, key: str, value: int, lo: int, hi: int, *, limit_kind: bool = False) -> bool:
    if in_range(value, lo, hi):
        return True
    if limit_kind:
        report.limit_exceeded(key)
    else:
        report.invalid(key)
    return False


async def resolve_currency(
    report: ViolationReport,
    resolver: ReferenceResolver,
    key: str,
    iso: str,
) -> int:
    currency_id = await resolver.currency_id(iso)
    if currency_id is None:
        report.invalid(key)
        return 0
    return currency_id


async def check_payment_gateways(
    report: ViolationReport,
    resolver: ReferenceResolver,
    gateways: list[PaymentGateway],
) -> None:
    """
    Validate a gateway list one rule class at a time.

    Within a rule class the first offending entry is reported and the class
    stops; the other classes still run over the whole list. Resolved gateway
    ids are written back onto the entries.
    """
    for gw in gateways:
        if not gw.gateway:
            report.required(consts.PAYMENT_GATEWAY_KEY)
            break
        gateway_id = await resolver.payment_gateway_id(gw.gateway)
        if gateway_id is None:
            report.invalid(consts.PAYMENT_GATEWAY_KEY)
            gw.gateway_id = ""
        else:
            gw.gateway_id = gateway_id

    for gw in gateways:
        if not gw.client_secret:
            report.required(consts.CLIENT_SECRET_KEY)
            break

    for gw in gateways:
        if not gw.email:
            report.required(consts.PAYMENT_GATEWAY_EMAIL_KEY)
            break
        if not is_valid_email(gw.email):
            report.invalid(consts.PAYMENT_GATEWAY_EMAIL_KEY)
            break

    for gw in gateways:
        if not gw.client_id:
            report.required(consts.CLIENT_ID_KEY)
            break

    for gw in gateways:
        if not gw.default_payout_currency:
            report.required(consts.DEFAULT_PAYOUT_CURRENCY_KEY)
            break
        if not is_member(gw.default_payout_currency, consts.SUPPORTED_CURRENCIES):
            report.invalid(consts.DEFAULT_PAYOUT_CURRENCY_KEY)
            break

    for gw in gateways:
        if not gw.default_payin_currency:
            report.required(consts.DEFAULT_PAYIN_CURRENCY_KEY)
            break
        if not is_member(gw.default_payin_currency, consts.SUPPORTED_CURRENCIES):
            report.invalid(consts.DEFAULT_PAYIN_CURRENCY_KEY)
            break


async def check_default_gateway(
    report: ViolationReport,
    resolver: ReferenceResolver,
    name: str | None,
    listed: list[str],
) -> str | None:
    """Return the resolved gateway id, or None after recording a violation."""
    key = consts.DEFAULT_PAYMENT_GATEWAY_KEY
    if not non_empty(name):
        report.required(key)
        return None
    assert name is not None
    if name not in listed:
        report.invalid(key)
        return None
    gateway_id = await resolver.payment_gateway_id(name)
    if gateway_id is None:
        report.not_found(key)
        return None
    return gateway_id
