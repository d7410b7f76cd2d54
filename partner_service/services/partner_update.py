from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable

from partner_service.core import consts
from partner_service.schemas.partner import (
    AddressDetailsUpdate,
    ContactDetailsUpdate,
    PartnerRecord,
    PartnerUpdate,
    PaymentUpdate,
    SubscriptionPlanUpdate,
)
from partner_service.services.field_rules import (
    check_bounds,
    check_default_gateway,
    check_email,
    check_payment_gateways,
    check_text,
    resolve_currency,
)
from partner_service.services.repository import PartnerRepository
from partner_service.services.resolver import ReferenceResolver
from partner_service.services.validators import (
    escape_html,
    is_valid_hex_color,
    is_valid_name_pattern,
    is_valid_postal_code,
    is_valid_url,
    max_length,
    non_empty,
)
from partner_service.services.violations import ViolationReport


@dataclass
class _Pass:
    partner_id: str
    update: PartnerUpdate
    work: PartnerRecord
    report: ViolationReport


def _text(value: str | None) -> str:
    return value or ""


def _number(value: int | None) -> int:
    return value or 0


class PartnerUpdateEngine:
    """
    Validate a sparse partner update against the stored record.

    Only fields present in ``update.model_fields_set`` are looked at; every
    other field of the working copy stays exactly as it was in ``base``.
    Resolver and repository exceptions propagate and void the report.
    """

    def __init__(self, *, repo: PartnerRepository, resolver: ReferenceResolver):
        self._repo = repo
        self._resolver = resolver
        self._handlers: dict[str, Callable[[_Pass], Awaitable[None]]] = {
            name: getattr(self, f"_on_{name}") for name in _HANDLED_FIELDS
        }

    async def validate(
        self,
        *,
        partner_id: str,
        update: PartnerUpdate,
        base: PartnerRecord,
        endpoint: str,
        method: str,
    ) -> tuple[ViolationReport, PartnerRecord]:
        p = _Pass(
            partner_id=partner_id,
            update=update,
            work=base.model_copy(deep=True),
            report=ViolationReport(endpoint=endpoint, method=method),
        )
        for name in _HANDLED_FIELDS:
            if name in update.model_fields_set:
                await self._handlers[name](p)
        return p.report, p.work

    def _uniq(self, p: _Pass) -> Callable[[str, str], Awaitable[bool]]:
        async def check(key: str, value: str) -> bool:
            return await self._repo.is_field_value_unique(key, value, p.partner_id)
        return check

    # Identity

    async def _on_name(self, p: _Pass) -> None:
        value = p.update.name
        ok = await check_text(
            p.report,
            consts.NAME_KEY,
            value,
            required=True,
            valid=is_valid_name_pattern,
            limit=consts.PARTNER_NAME_MAX_LENGTH,
            unique=self._uniq(p),
            trim=True,
        )
        if ok:
            p.work.name = _text(value).strip()

    async def _on_url(self, p: _Pass) -> None:
        value = p.update.url
        ok = await check_text(
            p.report,
            consts.URL_KEY,
            value,
            required=True,
            valid=is_valid_url,
            limit=consts.URL_MAX_LENGTH,
            unique=self._uniq(p),
        )
        if ok:
            p.work.url = _text(value)

    async def _on_logo(self, p: _Pass) -> None:
        value = _text(p.update.logo)
        if await check_text(p.report, consts.LOGO_KEY, value, valid=is_valid_url):
            p.work.logo = value

    async def _on_favicon(self, p: _Pass) -> None:
        p.work.favicon = _text(p.update.favicon)

    async def _on_language(self, p: _Pass) -> None:
        value = _text(p.update.language)
        if not value:
            return
        if not await self._resolver.language_exists(value):
            p.report.invalid(consts.LANGUAGE_KEY)
            return
        p.work.language = value

    # Presentation

    async def _on_background_color(self, p: _Pass) -> None:
        value = _text(p.update.background_color) or consts.BACKGROUND_COLOR_DEFAULT
        if not is_valid_hex_color(value):
            p.report.invalid(consts.BACKGROUND_COLOR_KEY)
            return
        p.work.background_color = value

    async def _on_background_image(self, p: _Pass) -> None:
        value = _text(p.update.background_image) or consts.BACKGROUND_IMAGE_DEFAULT
        if not is_valid_url(value):
            p.report.invalid(consts.BACKGROUND_IMAGE_KEY)
            return
        p.work.background_image = value

    async def _on_browser_title(self, p: _Pass) -> None:
        value = _text(p.update.browser_title) or consts.BROWSER_TITLE_DEFAULT
        if not max_length(value, consts.BROWSER_TITLE_MAX_LENGTH):
            p.report.limit_exceeded(consts.BROWSER_TITLE_KEY)
            return
        p.work.browser_title = value

    async def _on_theme_id(self, p: _Pass) -> None:
        theme_id = _number(p.update.theme_id) or consts.THEME_ID_DEFAULT
        if theme_id < 0 or await self._resolver.theme_name(theme_id) is None:
            p.report.invalid(consts.THEME_KEY)
            return
        p.work.theme_id = theme_id

    async def _on_login_page_logo(self, p: _Pass) -> None:
        p.work.login_page_logo = _text(p.update.login_page_logo) or consts.LOGIN_PAGE_LOGO_DEFAULT

    async def _on_loader(self, p: _Pass) -> None:
        p.work.loader = _text(p.update.loader) or consts.LOADER_DEFAULT

    async def _on_website_url(self, p: _Pass) -> None:
        value = _text(p.update.website_url)
        ok = await check_text(
            p.report,
            consts.WEBSITE_URL_KEY,
            value,
            valid=is_valid_url,
            limit=consts.URL_MAX_LENGTH,
            unique=self._uniq(p),
        )
        if ok:
            p.work.website_url = value

    async def _on_profile_url(self, p: _Pass) -> None:
        value = _text(p.update.profile_url)
        if await check_text(p.report, consts.PROFILE_URL_KEY, value, valid=is_valid_url, limit=consts.URL_MAX_LENGTH):
            p.work.profile_url = value

    async def _on_payment_url(self, p: _Pass) -> None:
        value = _text(p.update.payment_url)
        if await check_text(p.report, consts.PAYMENT_URL_KEY, value, valid=is_valid_url, limit=consts.URL_MAX_LENGTH):
            p.work.payment_url = value

    async def _on_landing_page(self, p: _Pass) -> None:
        value = _text(p.update.landing_page)
        ok = await check_text(
            p.report,
            consts.LANDING_PAGE_KEY,
            value,
            valid=is_valid_url,
            limit=consts.URL_MAX_LENGTH,
            unique=self._uniq(p),
        )
        if ok:
            p.work.landing_page = value

    async def _on_site_info(self, p: _Pass) -> None:
        value = escape_html(_text(p.update.site_info))
        if not max_length(value, consts.SITE_INFO_MAX_LENGTH):
            p.report.limit_exceeded(consts.SITE_INFO_KEY)
            return
        if value:
            p.work.site_info = value

    # Contact details

    async def _on_contact_details(self, p: _Pass) -> None:
        contact = p.update.contact_details or ContactDetailsUpdate()
        present = contact.model_fields_set
        target = p.work.contact_details

        if consts.CONTACT_PERSON_KEY in present:
            value = contact.contact_person
            ok = await check_text(
                p.report,
                consts.CONTACT_PERSON_KEY,
                value,
                required=True,
                valid=is_valid_name_pattern,
                limit=consts.CONTACT_PERSON_MAX_LENGTH,
            )
            if ok:
                target.contact_person = _text(value)

        for key in (
            consts.EMAIL_KEY,
            consts.NOREPLY_EMAIL_KEY,
            consts.FEEDBACK_EMAIL_KEY,
            consts.SUPPORT_EMAIL_KEY,
        ):
            if key not in present:
                continue
            value = getattr(contact, key)
            if await check_email(p.report, key, value, unique=self._uniq(p)):
                setattr(target, key, _text(value))

    async def _on_album_review_email(self, p: _Pass) -> None:
        value = p.update.album_review_email
        if await check_email(p.report, consts.ALBUM_REVIEW_EMAIL_KEY, value, unique=self._uniq(p)):
            p.work.album_review_email = _text(value)

    # Address details

    async def _on_address_details(self, p: _Pass) -> None:
        address = p.update.address_details or AddressDetailsUpdate()
        present = address.model_fields_set
        target = p.work.address_details

        if consts.ADDRESS_KEY in present:
            value = address.address
            if await check_text(p.report, consts.ADDRESS_KEY, value, required=True, limit=consts.ADDRESS_MAX_LENGTH):
                target.address = _text(value)

        if consts.STREET_KEY in present:
            value = _text(address.street)
            if await check_text(p.report, consts.STREET_KEY, value, limit=consts.STREET_MAX_LENGTH):
                target.street = value

        if consts.COUNTRY_KEY in present:
            value = _text(address.country)
            if not value:
                p.report.required(consts.COUNTRY_KEY)
            elif not await self._resolver.country_exists(value):
                p.report.invalid(consts.COUNTRY_KEY)
            else:
                target.country = value

        if consts.STATE_KEY in present:
            value = _text(address.state)
            country = _text(address.country) if consts.COUNTRY_KEY in present else target.country
            if value and not await self._resolver.state_exists(country, value):
                p.report.invalid(consts.STATE_KEY)
            else:
                target.state = value

        if consts.CITY_KEY in present:
            value = _text(address.city)
            if await check_text(p.report, consts.CITY_KEY, value, limit=consts.CITY_MAX_LENGTH):
                target.city = value

        if consts.POSTAL_CODE_KEY in present:
            value = _text(address.postal_code)
            if await check_text(p.report, consts.POSTAL_CODE_KEY, value, valid=is_valid_postal_code):
                target.postal_code = value

    # Subscription

    async def _on_subscription_details(self, p: _Pass) -> None:
        plan = p.update.subscription_details or SubscriptionPlanUpdate()
        present = plan.model_fields_set
        target = p.work.subscription_details

        if consts.PLAN_ID_KEY in present:
            value = _text(plan.plan_id)
            if value:
                plan_id = await self._repo.get_id(consts.PARTNER_PLAN_TABLE, consts.ID_KEY, value)
                if not plan_id:
                    p.report.invalid(consts.PLAN_ID_KEY)
                else:
                    target.plan_id = plan_id

        if consts.PLAN_START_DATE_KEY in present:
            target.plan_start_date = _text(plan.plan_start_date)
        if consts.PLAN_LAUNCH_DATE_KEY in present:
            target.plan_launch_date = _text(plan.plan_launch_date)

    # Payment

    async def _on_payment(self, p: _Pass) -> None:
        payment = p.update.payment or PaymentUpdate()
        present = payment.model_fields_set
        target = p.work.payment

        if consts.PAYMENT_GATEWAYS_KEY in present:
            gateways = [gw.model_copy() for gw in payment.payment_gateways or []]
            if not gateways:
                p.report.required(consts.PAYMENT_GATEWAY_KEY)
            await check_payment_gateways(p.report, self._resolver, gateways)
            target.payment_gateways = gateways

        if consts.PAYOUT_MIN_LIMIT_KEY in present:
            value = _number(payment.payout_min_limit)
            if value < 0:
                p.report.invalid(consts.PAYOUT_MIN_LIMIT_KEY)
            else:
                target.payout_min_limit = value or consts.PAYOUT_MIN_LIMIT_DEFAULT

        if consts.MAX_REMITTANCE_PER_MONTH_KEY in present:
            value = _number(payment.max_remittance_per_month)
            if value == 0:
                target.max_remittance_per_month = consts.MAX_REMITTANCE_PER_MONTH_DEFAULT
            elif check_bounds(p.report, consts.MAX_REMITTANCE_PER_MONTH_KEY, value, 0, consts.MAX_REMITTANCE_PER_MONTH):
                target.max_remittance_per_month = value

        if consts.DEFAULT_CURRENCY_KEY in present:
            value = _text(payment.default_currency)
            if value:
                currency_id = await resolve_currency(p.report, self._resolver, consts.PAYOUT_CURRENCY_KEY, value)
                if currency_id:
                    target.default_currency = value
                    p.work.default_currency_id = currency_id

        # A replaced gateway list must still contain the default, stored or new.
        if consts.DEFAULT_PAYMENT_GATEWAY_KEY in present:
            default = payment.default_payment_gateway
        elif consts.PAYMENT_GATEWAYS_KEY in present:
            default = target.default_payment_gateway
        else:
            return
        listed = [gw.gateway for gw in target.payment_gateways]
        gateway_id = await check_default_gateway(p.report, self._resolver, default, listed)
        if gateway_id is not None:
            target.default_payment_gateway = _text(default)
            p.work.default_payment_gateway_id = gateway_id

    # Business attributes

    async def _on_business_model(self, p: _Pass) -> None:
        value = p.update.business_model
        if not non_empty(value):
            p.report.required(consts.BUSINESS_MODEL_KEY)
            return
        lookup_id = await self._resolver.lookup_id(consts.BUSINESS_LOOKUP_TYPE, _text(value))
        if lookup_id is None:
            p.report.invalid(consts.BUSINESS_MODEL_KEY)
            return
        p.work.business_model = _text(value)
        p.work.business_model_id = lookup_id

    async def _on_login_type(self, p: _Pass) -> None:
        value = _text(p.update.login_type) or consts.LOGIN_TYPE_DEFAULT
        lookup_id = await self._resolver.lookup_id(consts.LOGIN_LOOKUP_TYPE, value)
        if lookup_id is None:
            p.report.invalid(consts.LOGIN_TYPE_KEY)
            return
        p.work.login_type = value
        p.work.login_type_id = lookup_id

    async def _on_product_review(self, p: _Pass) -> None:
        value = _text(p.update.product_review) or consts.PRODUCT_REVIEW_DEFAULT
        lookup_id = await self._resolver.lookup_id(consts.PRODUCT_REVIEW_LOOKUP_TYPE, value)
        if lookup_id is None:
            p.report.invalid(consts.PRODUCT_REVIEW_KEY)
            return
        p.work.product_review = value
        p.work.product_review_id = lookup_id

    async def _on_member_grace_period(self, p: _Pass) -> None:
        value = _text(p.update.member_grace_period)
        if not value:
            return
        duration_id = await self._resolver.subscription_duration_id(value)
        if duration_id is None:
            p.report.invalid(consts.MEMBER_GRACE_PERIOD_KEY)
            return
        p.work.member_grace_period = value
        p.work.member_grace_period_id = duration_id

    async def _on_member_default_country(self, p: _Pass) -> None:
        value = _text(p.update.member_default_country)
        if not value:
            return
        if not await self._resolver.country_exists(value):
            p.report.invalid(consts.MEMBER_DEFAULT_COUNTRY_KEY)
            return
        p.work.member_default_country = value

    async def _on_music_language(self, p: _Pass) -> None:
        value = _text(p.update.music_language)
        if not value:
            return
        if not await self._resolver.language_exists(value):
            p.report.invalid(consts.MUSIC_LANGUAGE_KEY)
            return
        p.work.music_language = value

    async def _on_mobile_verify_interval(self, p: _Pass) -> None:
        value = _number(p.update.mobile_verify_interval)
        if value < 0:
            p.report.invalid(consts.MOBILE_VERIFY_INTERVAL_KEY)
            return
        p.work.mobile_verify_interval = value or consts.MOBILE_VERIFY_INTERVAL_DEFAULT

    async def _on_expiry_warning_count(self, p: _Pass) -> None:
        value = _number(p.update.expiry_warning_count)
        if value == 0:
            p.work.expiry_warning_count = consts.EXPIRY_WARNING_COUNT_DEFAULT
        elif check_bounds(p.report, consts.EXPIRY_WARNING_COUNT_KEY, value, 0, consts.MAX_EXPIRY_WARNING_COUNT):
            p.work.expiry_warning_count = value

    async def _on_free_plan_limit(self, p: _Pass) -> None:
        value = _number(p.update.free_plan_limit)
        if value == 0:
            p.work.free_plan_limit = consts.FREE_PLAN_LIMIT_DEFAULT
        elif check_bounds(p.report, consts.FREE_PLAN_LIMIT_KEY, value, 0, consts.MAX_FREE_PLAN_LIMIT):
            p.work.free_plan_limit = value

    async def _on_outlets_processing_duration(self, p: _Pass) -> None:
        value = _number(p.update.outlets_processing_duration)
        if value == 0:
            p.work.outlets_processing_duration = consts.OUTLETS_PROCESSING_DURATION_DEFAULT
        elif check_bounds(
            p.report,
            consts.OUTLETS_PROCESSING_DURATION_KEY,
            value,
            consts.MIN_OUTLETS_PROCESSING_DURATION,
            consts.MAX_OUTLETS_PROCESSING_DURATION,
            limit_kind=True,
        ):
            p.work.outlets_processing_duration = value

    async def _on_payout_target_currency(self, p: _Pass) -> None:
        value = _text(p.update.payout_target_currency)
        if not value:
            return
        currency_id = await resolve_currency(p.report, self._resolver, consts.PAYOUT_TARGET_CURRENCY_KEY, value)
        if currency_id:
            p.work.payout_target_currency = value
            p.work.payout_target_currency_id = currency_id

    async def _on_default_price_code_currency(self, p: _Pass) -> None:
        value = _text(p.update.default_price_code_currency)
        if not value:
            return
        currency_id = await resolve_currency(p.report, self._resolver, consts.DEFAULT_PRICE_CODE_CURRENCY_KEY, value)
        if currency_id:
            p.work.default_price_code_currency = value
            p.work.default_price_code_currency_id = currency_id

    async def _on_enable_mail(self, p: _Pass) -> None:
        p.work.enable_mail = bool(p.update.enable_mail)

    async def _on_member_pay_to_partner(self, p: _Pass) -> None:
        p.work.member_pay_to_partner = bool(p.update.member_pay_to_partner)


# Evaluation order. Must name every field of PartnerUpdate.
_HANDLED_FIELDS: tuple[str, ...] = (
    "name",
    "url",
    "logo",
    "favicon",
    "language",
    "payout_target_currency",
    "default_price_code_currency",
    "member_grace_period",
    "business_model",
    "product_review",
    "login_type",
    "contact_details",
    "subscription_details",
    "background_color",
    "background_image",
    "website_url",
    "browser_title",
    "profile_url",
    "payment_url",
    "site_info",
    "music_language",
    "member_default_country",
    "theme_id",
    "mobile_verify_interval",
    "landing_page",
    "address_details",
    "album_review_email",
    "free_plan_limit",
    "expiry_warning_count",
    "outlets_processing_duration",
    "payment",
    "login_page_logo",
    "loader",
    "enable_mail",
    "member_pay_to_partner",
)

_unhandled = set(PartnerUpdate.model_fields) ^ set(_HANDLED_FIELDS)
if _unhandled:
    raise RuntimeError(f"partner update dispatch out of sync: {sorted(_unhandled)}")
