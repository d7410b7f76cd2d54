from __future__ import annotations

import logging

from partner_service.core import consts
from partner_service.core.crypto import encrypt_value
from partner_service.core.errors import CredentialError
from partner_service.core.security import generate_client_credential
from partner_service.schemas.oauth import PartnerOAuthCredential
from partner_service.schemas.partner import PartnerRecord
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

log = logging.getLogger(__name__)


def apply_defaults(record: PartnerRecord) -> None:
    """Fill zero-valued optional fields in place. Runs once, before validation."""
    if not record.login_page_logo:
        record.login_page_logo = consts.LOGIN_PAGE_LOGO_DEFAULT
    if not record.loader:
        record.loader = consts.LOADER_DEFAULT
    if not record.background_color:
        record.background_color = consts.BACKGROUND_COLOR_DEFAULT
    if not record.background_image:
        record.background_image = consts.BACKGROUND_IMAGE_DEFAULT
    if not record.language:
        record.language = consts.LANGUAGE_DEFAULT
    if not record.browser_title:
        record.browser_title = consts.BROWSER_TITLE_DEFAULT
    if record.mobile_verify_interval == 0:
        record.mobile_verify_interval = consts.MOBILE_VERIFY_INTERVAL_DEFAULT
    if not record.payout_target_currency:
        record.payout_target_currency = consts.PAYOUT_TARGET_CURRENCY_DEFAULT
    if record.theme_id == 0:
        record.theme_id = consts.THEME_ID_DEFAULT
    if not record.login_type:
        record.login_type = consts.LOGIN_TYPE_DEFAULT
    if record.payment.payout_min_limit == 0:
        record.payment.payout_min_limit = consts.PAYOUT_MIN_LIMIT_DEFAULT
    if record.payment.max_remittance_per_month == 0:
        record.payment.max_remittance_per_month = consts.MAX_REMITTANCE_PER_MONTH_DEFAULT
    if not record.payment.default_currency:
        record.payment.default_currency = consts.PAYOUT_CURRENCY_DEFAULT
    if not record.member_grace_period:
        record.member_grace_period = consts.MEMBER_GRACE_PERIOD_DEFAULT
    if record.expiry_warning_count == 0:
        record.expiry_warning_count = consts.EXPIRY_WARNING_COUNT_DEFAULT
    if not record.default_price_code_currency:
        record.default_price_code_currency = consts.DEFAULT_PRICE_CODE_CURRENCY_DEFAULT
    if not record.music_language:
        record.music_language = consts.MUSIC_LANGUAGE_DEFAULT
    if not record.member_default_country:
        record.member_default_country = consts.MEMBER_DEFAULT_COUNTRY_DEFAULT
    if record.outlets_processing_duration == 0:
        record.outlets_processing_duration = consts.OUTLETS_PROCESSING_DURATION_DEFAULT
    if record.free_plan_limit == 0:
        record.free_plan_limit = consts.FREE_PLAN_LIMIT_DEFAULT
    if not record.product_review:
        record.product_review = consts.PRODUCT_REVIEW_DEFAULT


class PartnerCreateEngine:
    """
    Validate a complete partner record.

    Every field is evaluated on every call. Resolved ids are written onto the
    record as they are found, so a clean record is ready for insertion.
    """

    def __init__(
        self,
        *,
        repo: PartnerRepository,
        resolver: ReferenceResolver,
        encryption_key: str,
    ):
        self._repo = repo
        self._resolver = resolver
        self._encryption_key = encryption_key

    async def _unique(self, key: str, value: str) -> bool:
        exists = await self._repo.is_exists(consts.PARTNER_TABLE, key, value)
        return not exists

    async def validate(self, record: PartnerRecord, *, endpoint: str, method: str) -> ViolationReport:
        report = ViolationReport(endpoint=endpoint, method=method)
        await self._identity(report, record)
        await self._contacts(report, record)
        await self._urls(report, record)
        await self._address(report, record)
        await self._presentation(report, record)
        await self._business(report, record)
        await self._payment(report, record)
        return report

    async def _identity(self, report: ViolationReport, r: PartnerRecord) -> None:
        if await check_text(
            report,
            consts.NAME_KEY,
            r.name,
            required=True,
            valid=is_valid_name_pattern,
            limit=consts.PARTNER_NAME_MAX_LENGTH,
            unique=self._unique,
            trim=True,
        ):
            r.name = r.name.strip()

        await check_text(
            report,
            consts.URL_KEY,
            r.url,
            required=True,
            valid=is_valid_url,
            limit=consts.URL_MAX_LENGTH,
            unique=self._unique,
        )
        await check_text(report, consts.LOGO_KEY, r.logo, required=True, valid=is_valid_url)

        if non_empty(r.language) and not await self._resolver.language_exists(r.language):
            report.invalid(consts.LANGUAGE_KEY)

    async def _contacts(self, report: ViolationReport, r: PartnerRecord) -> None:
        c = r.contact_details
        await check_text(
            report,
            consts.CONTACT_PERSON_KEY,
            c.contact_person,
            required=True,
            limit=consts.CONTACT_PERSON_MAX_LENGTH,
        )
        await check_email(report, consts.EMAIL_KEY, c.email, unique=self._unique)
        await check_email(report, consts.NOREPLY_EMAIL_KEY, c.noreply_email, unique=self._unique)
        await check_email(report, consts.SUPPORT_EMAIL_KEY, c.support_email, unique=self._unique)
        await check_email(report, consts.FEEDBACK_EMAIL_KEY, c.feedback_email, unique=self._unique)
        await check_email(report, consts.ALBUM_REVIEW_EMAIL_KEY, r.album_review_email, unique=self._unique)

    async def _urls(self, report: ViolationReport, r: PartnerRecord) -> None:
        for key, value, unique in (
            (consts.WEBSITE_URL_KEY, r.website_url, self._unique),
            (consts.LANDING_PAGE_KEY, r.landing_page, self._unique),
            (consts.PROFILE_URL_KEY, r.profile_url, None),
            (consts.PAYMENT_URL_KEY, r.payment_url, None),
        ):
            await check_text(report, key, value, valid=is_valid_url, limit=consts.URL_MAX_LENGTH, unique=unique)

    async def _address(self, report: ViolationReport, r: PartnerRecord) -> None:
        a = r.address_details
        await check_text(report, consts.ADDRESS_KEY, a.address, required=True, limit=consts.ADDRESS_MAX_LENGTH)
        await check_text(report, consts.CITY_KEY, a.city, limit=consts.CITY_MAX_LENGTH)
        await check_text(report, consts.STREET_KEY, a.street, limit=consts.STREET_MAX_LENGTH)

        if not non_empty(a.country):
            report.required(consts.COUNTRY_KEY)
        elif not await self._resolver.country_exists(a.country):
            report.invalid(consts.COUNTRY_KEY)
        elif non_empty(a.state) and not await self._resolver.state_exists(a.country, a.state):
            report.invalid(consts.STATE_KEY)

        await check_text(report, consts.POSTAL_CODE_KEY, a.postal_code, valid=is_valid_postal_code)

    async def _presentation(self, report: ViolationReport, r: PartnerRecord) -> None:
        if not is_valid_hex_color(r.background_color):
            report.invalid(consts.BACKGROUND_COLOR_KEY)
        if not is_valid_url(r.background_image):
            report.invalid(consts.BACKGROUND_IMAGE_KEY)
        if not max_length(r.browser_title, consts.BROWSER_TITLE_MAX_LENGTH):
            report.limit_exceeded(consts.BROWSER_TITLE_KEY)

        if r.theme_id < 0 or await self._resolver.theme_name(r.theme_id) is None:
            report.invalid(consts.THEME_KEY)

        r.site_info = escape_html(r.site_info)
        if not max_length(r.site_info, consts.SITE_INFO_MAX_LENGTH):
            report.limit_exceeded(consts.SITE_INFO_KEY)

    async def _business(self, report: ViolationReport, r: PartnerRecord) -> None:
        if non_empty(r.music_language) and not await self._resolver.language_exists(r.music_language):
            report.invalid(consts.MUSIC_LANGUAGE_KEY)
        if non_empty(r.member_default_country) and not await self._resolver.country_exists(r.member_default_country):
            report.invalid(consts.MEMBER_DEFAULT_COUNTRY_KEY)

        r.payout_target_currency_id = await resolve_currency(
            report, self._resolver, consts.PAYOUT_TARGET_CURRENCY_KEY, r.payout_target_currency
        )
        r.default_price_code_currency_id = await resolve_currency(
            report, self._resolver, consts.DEFAULT_PRICE_CODE_CURRENCY_KEY, r.default_price_code_currency
        )

        if not non_empty(r.business_model):
            report.required(consts.BUSINESS_MODEL_KEY)
        else:
            r.business_model_id = await self._lookup(
                report, consts.BUSINESS_MODEL_KEY, consts.BUSINESS_LOOKUP_TYPE, r.business_model
            )
        r.login_type_id = await self._lookup(report, consts.LOGIN_TYPE_KEY, consts.LOGIN_LOOKUP_TYPE, r.login_type)
        r.product_review_id = await self._lookup(
            report, consts.PRODUCT_REVIEW_KEY, consts.PRODUCT_REVIEW_LOOKUP_TYPE, r.product_review
        )

        duration_id = await self._resolver.subscription_duration_id(r.member_grace_period)
        if duration_id is None:
            report.invalid(consts.MEMBER_GRACE_PERIOD_KEY)
        else:
            r.member_grace_period_id = duration_id

        check_bounds(report, consts.FREE_PLAN_LIMIT_KEY, r.free_plan_limit, 0, consts.MAX_FREE_PLAN_LIMIT)
        if r.mobile_verify_interval < 0:
            report.invalid(consts.MOBILE_VERIFY_INTERVAL_KEY)
        check_bounds(report, consts.EXPIRY_WARNING_COUNT_KEY, r.expiry_warning_count, 0, consts.MAX_EXPIRY_WARNING_COUNT)
        check_bounds(
            report,
            consts.OUTLETS_PROCESSING_DURATION_KEY,
            r.outlets_processing_duration,
            consts.MIN_OUTLETS_PROCESSING_DURATION,
            consts.MAX_OUTLETS_PROCESSING_DURATION,
            limit_kind=True,
        )

    async def _lookup(self, report: ViolationReport, key: str, lookup_type: str, value: str) -> int:
        lookup_id = await self._resolver.lookup_id(lookup_type, value)
        if lookup_id is None:
            report.invalid(key)
            return 0
        return lookup_id

    async def _payment(self, report: ViolationReport, r: PartnerRecord) -> None:
        pay = r.payment
        check_bounds(report, consts.MAX_REMITTANCE_PER_MONTH_KEY, pay.max_remittance_per_month, 0, consts.MAX_REMITTANCE_PER_MONTH)
        if pay.payout_min_limit < 0:
            report.invalid(consts.PAYOUT_MIN_LIMIT_KEY)

        r.default_currency_id = await resolve_currency(
            report, self._resolver, consts.PAYOUT_CURRENCY_KEY, pay.default_currency
        )

        if not pay.payment_gateways:
            report.required(consts.PAYMENT_GATEWAY_KEY)
        await check_payment_gateways(report, self._resolver, pay.payment_gateways)

        listed = [gw.gateway for gw in pay.payment_gateways]
        gateway_id = await check_default_gateway(report, self._resolver, pay.default_payment_gateway, listed)
        if gateway_id is not None:
            r.default_payment_gateway_id = gateway_id

    async def generate_oauth_credential(self) -> PartnerOAuthCredential:
        """Two independent random credentials, encrypted, tagged with the internal provider."""
        try:
            client_id = encrypt_value(generate_client_credential(), self._encryption_key)
            client_secret = encrypt_value(generate_client_credential(), self._encryption_key)
        except CredentialError:
            log.exception("partner oauth credential generation failed")
            raise

        provider_id = await self._resolver.oauth_provider_id(consts.INTERNAL_OAUTH_PROVIDER)
        if provider_id is None:
            log.warning("internal oauth provider could not be resolved")
        return PartnerOAuthCredential(
            client_id=client_id,
            client_secret=client_secret,
            provider_id=provider_id or "",
        )
