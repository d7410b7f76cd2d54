"""
Partner service facade.

Each operation opens its own ViolationReport for the (endpoint, method) it
serves. Field problems come back in ``ServiceResult.violations``; operational
failures (reference services, cache, repository) propagate as exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from partner_service.core import consts
from partner_service.core.crypto import InvalidToken, credentials_key, decrypt_value
from partner_service.core.errors import PartnerServiceError
from partner_service.schemas.listing import ListParams, MetaData, PageResult, PartnerSubResource, QueryParams
from partner_service.schemas.oauth import PartnerOAuthCredential, PartnerOAuthHeader
from partner_service.schemas.partner import (
    PartnerListItem,
    PartnerRecord,
    PartnerStatusUpdate,
    PartnerStores,
    PartnerUpdate,
    PaymentGateway,
)
from partner_service.schemas.terms import TermsAndConditions, TermsAndConditionsUpdate
from partner_service.services.pagination import (
    build_metadata,
    is_past_last_page,
    validate_list_params,
    validate_query_params,
)
from partner_service.services.partner_create import PartnerCreateEngine, apply_defaults
from partner_service.services.partner_update import PartnerUpdateEngine
from partner_service.services.redaction import redact_payload
from partner_service.services.repository import PartnerRepository
from partner_service.services.resolver import ReferenceResolver
from partner_service.services.terms import validate_terms_update
from partner_service.services.validators import is_valid_uuid, non_empty
from partner_service.services.violations import ViolationReport

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    value: T | None = None
    violations: ViolationReport | None = None
    metadata: MetaData | None = None

    @property
    def ok(self) -> bool:
        return not self.violations


def _report(method: str) -> ViolationReport:
    return ViolationReport(endpoint=consts.PARTNER_ENDPOINT, method=method)


class PartnerService:
    def __init__(
        self,
        *,
        repo: PartnerRepository,
        resolver: ReferenceResolver,
        encryption_key: str | None = None,
    ):
        self._repo = repo
        self._resolver = resolver
        self._key = encryption_key if encryption_key is not None else credentials_key()
        self._create = PartnerCreateEngine(repo=repo, resolver=resolver, encryption_key=self._key)
        self._update = PartnerUpdateEngine(repo=repo, resolver=resolver)

    # Create / update

    async def create_partner(self, record: PartnerRecord) -> ServiceResult[str]:
        apply_defaults(record)
        report = await self._create.validate(
            record, endpoint=consts.PARTNER_ENDPOINT, method=consts.METHOD_POST
        )
        if report:
            log.info("partner create rejected: %s", sorted(report))
            return ServiceResult(violations=report)

        credential = await self._create.generate_oauth_credential()
        partner_id = await self._repo.create_partner(record, credential)
        log.info("partner created id=%s", partner_id)
        return ServiceResult(value=partner_id)

    async def update_partner(
        self,
        partner_id: str,
        actor_id: str,
        update: PartnerUpdate,
    ) -> ServiceResult[PartnerRecord]:
        report = _report(consts.METHOD_PATCH)
        if not is_valid_uuid(partner_id):
            report.invalid(consts.PARTNER_ID_KEY)
            return ServiceResult(violations=report)

        base = await self._repo.get_by_id(partner_id)
        if base is None:
            report.not_found(consts.PARTNER_ID_KEY)
            return ServiceResult(violations=report)

        report, work = await self._update.validate(
            partner_id=partner_id,
            update=update,
            base=base,
            endpoint=consts.PARTNER_ENDPOINT,
            method=consts.METHOD_PATCH,
        )
        if report:
            return ServiceResult(violations=report)

        redacted = redact_payload(update.model_dump(mode="json", exclude_unset=True))
        log.debug("partner update id=%s payload=%s", partner_id, redacted)
        await self._repo.update_partner(partner_id, actor_id, work, redacted_payload=redacted)
        return ServiceResult(value=work)

    async def update_partner_status(self, partner_id: str, status: PartnerStatusUpdate) -> ServiceResult[bool]:
        check = await self.is_partner_exists(partner_id, method=consts.METHOD_PATCH)
        if not check.ok:
            return check
        await self._repo.update_partner_status(partner_id, status.active)
        return ServiceResult(value=status.active)

    # Reads

    async def list_partners(self, params: ListParams) -> ServiceResult[list[PartnerListItem]]:
        report = _report(consts.METHOD_GET)
        validate_list_params(params, report)
        if report:
            return ServiceResult(violations=report)

        items, total = await self._repo.get_all(params)
        if is_past_last_page(params.page, params.limit, total):
            return ServiceResult(value=[])
        return ServiceResult(value=items, metadata=build_metadata(params.page, params.limit, total))

    async def get_partner_by_id(
        self,
        partner_id: str,
        params: QueryParams | None = None,
    ) -> ServiceResult[PartnerRecord | PageResult[PartnerSubResource]]:
        params = params or QueryParams()
        report = _report(consts.METHOD_GET)

        if not params.fields:
            record = await self._repo.get_by_id(partner_id)
            if record is None:
                report.not_found(consts.PARTNER_ID_KEY)
                return ServiceResult(violations=report)
            return ServiceResult(value=record)

        if params.fields == consts.PRODUCT_TYPE_FIELD:
            fetch = self._repo.get_partner_product_types
        elif params.fields == consts.TRACK_FILE_QUALITY_FIELD:
            fetch = self._repo.get_partner_track_file_quality
        else:
            report.invalid(consts.FIELDS_KEY)
            return ServiceResult(violations=report)

        validate_query_params(params, report)
        if report:
            return ServiceResult(violations=report)

        rows, total = await fetch(partner_id, params)
        if is_past_last_page(params.page, params.limit, total):
            return ServiceResult(value=PageResult())
        metadata = build_metadata(params.page, params.limit, total)
        return ServiceResult(value=PageResult(records=rows, metadata=metadata), metadata=metadata)

    async def get_partner_name(self, partner_id: str) -> str:
        return await self._repo.get_partner_name(partner_id)

    async def get_partner_payment_gateways(self, partner_id: str) -> list[PaymentGateway]:
        return await self._repo.get_partner_payment_gateways(partner_id)

    async def get_partner_oauth_credential(
        self,
        partner_id: str,
        header: PartnerOAuthHeader,
    ) -> ServiceResult[PartnerOAuthCredential]:
        report = _report(consts.METHOD_GET)
        if not header.provider_name:
            report.required(consts.OAUTH_PROVIDER_KEY)
            return ServiceResult(violations=report)

        provider_id = await self._resolver.oauth_provider_id(header.provider_name)
        if provider_id is None:
            report.invalid(consts.OAUTH_PROVIDER_KEY)
            return ServiceResult(violations=report)

        stored = await self._repo.get_partner_oauth_credential(partner_id, provider_id)
        try:
            client_secret = decrypt_value(stored.client_secret, self._key)
            client_id = decrypt_value(stored.client_id, self._key)
        except InvalidToken:
            log.error("unable to decrypt oauth credential for partner %s", partner_id)
            report.invalid(consts.ENCRYPTION_KEY)
            return ServiceResult(violations=report)

        return ServiceResult(
            value=stored.model_copy(update={"client_id": client_id, "client_secret": client_secret})
        )

    # Terms and conditions

    async def get_all_terms_and_conditions(self, partner_id: str) -> TermsAndConditions:
        return await self._repo.get_all_terms_and_conditions(partner_id)

    async def update_terms_and_conditions(
        self,
        partner_id: str,
        actor_id: str,
        payload: TermsAndConditionsUpdate,
    ) -> ServiceResult[None]:
        report = _report(consts.METHOD_PATCH)
        validate_terms_update(payload, report)
        if report:
            return ServiceResult(violations=report)
        await self._repo.update_terms_and_conditions(partner_id, actor_id, payload)
        return ServiceResult()

    # Stores

    async def create_partner_stores(self, partner_id: str, stores: PartnerStores) -> list[str]:
        return await self._repo.create_partner_stores(partner_id, stores)

    async def get_partner_stores(self, partner_id: str) -> PartnerStores:
        return await self._repo.get_partner_stores(partner_id)

    async def get_store_names(self, store_ids: list[str]) -> list[str]:
        """Names of the given stores, in catalogue order. Empty when the store service is unreachable."""
        try:
            catalogue = await self._resolver.stores()
        except PartnerServiceError:
            log.exception("unable to load store catalogue")
            return []
        wanted = set(store_ids)
        return [s.name for s in catalogue if s.store_id in wanted]

    # Existence

    async def is_partner_exists(self, partner_id: str, *, method: str = consts.METHOD_GET) -> ServiceResult[bool]:
        report = _report(method)
        if not is_valid_uuid(partner_id):
            report.invalid(consts.PARTNER_ID_KEY)
            return ServiceResult(value=False, violations=report)
        if not await self._repo.is_partner_exists(partner_id):
            report.not_found(consts.PARTNER_ID_KEY)
            return ServiceResult(value=False, violations=report)
        return ServiceResult(value=True)

    async def is_member_exists(
        self,
        partner_id: str,
        member_id: str,
        *,
        method: str = consts.METHOD_GET,
    ) -> ServiceResult[bool]:
        report = _report(method)
        if not non_empty(member_id):
            report.required(consts.MEMBER_ID_KEY)
        elif not is_valid_uuid(member_id):
            report.invalid(consts.MEMBER_ID_KEY)
        elif not await self._resolver.member_exists(member_id, partner_id):
            report.not_found(consts.MEMBER_ID_KEY)
        if report:
            return ServiceResult(value=False, violations=report)
        return ServiceResult(value=True)

    async def delete_partner(self, partner_id: str) -> ServiceResult[None]:
        check = await self.is_partner_exists(partner_id, method=consts.METHOD_DELETE)
        if not check.ok:
            return ServiceResult(violations=check.violations)
        await self._repo.delete(partner_id)
        log.info("partner deleted id=%s", partner_id)
        return ServiceResult()
