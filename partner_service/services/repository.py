from __future__ import annotations

from typing import Any, Protocol

from partner_service.schemas.listing import ListParams, PartnerSubResource, QueryParams
from partner_service.schemas.oauth import PartnerOAuthCredential
from partner_service.schemas.partner import (
    PartnerListItem,
    PartnerRecord,
    PartnerStores,
    PaymentGateway,
)
from partner_service.schemas.terms import TermsAndConditions, TermsAndConditionsUpdate


class PartnerRepository(Protocol):
    """
    Persistence port consumed by the partner services.

    Implementations own their storage and raise their own exceptions; the
    services let those propagate unchanged.
    """

    async def is_field_value_unique(self, field: str, value: str, exclude_id: str) -> bool: ...

    async def is_exists(self, table: str, field: str, value: str) -> bool: ...

    async def get_id(self, table: str, field: str, value: str) -> str | None: ...

    async def create_partner(self, record: PartnerRecord, credential: PartnerOAuthCredential) -> str: ...

    async def update_partner(
        self,
        partner_id: str,
        actor_id: str,
        record: PartnerRecord,
        redacted_payload: dict[str, Any],
    ) -> None: ...

    async def get_by_id(self, partner_id: str) -> PartnerRecord | None: ...

    async def get_all(self, params: ListParams) -> tuple[list[PartnerListItem], int]: ...

    async def delete(self, partner_id: str) -> None: ...

    async def is_partner_exists(self, partner_id: str) -> bool: ...

    async def get_partner_name(self, partner_id: str) -> str: ...

    async def update_partner_status(self, partner_id: str, active: bool) -> None: ...

    async def get_partner_oauth_credential(self, partner_id: str, provider_id: str) -> PartnerOAuthCredential: ...

    async def get_all_terms_and_conditions(self, partner_id: str) -> TermsAndConditions: ...

    async def update_terms_and_conditions(
        self,
        partner_id: str,
        actor_id: str,
        payload: TermsAndConditionsUpdate,
    ) -> None: ...

    async def create_partner_stores(self, partner_id: str, stores: PartnerStores) -> list[str]: ...

    async def get_partner_stores(self, partner_id: str) -> PartnerStores: ...

    async def get_partner_payment_gateways(self, partner_id: str) -> list[PaymentGateway]: ...

    async def get_partner_product_types(
        self, partner_id: str, params: QueryParams
    ) -> tuple[list[PartnerSubResource], int]: ...

    async def get_partner_track_file_quality(
        self, partner_id: str, params: QueryParams
    ) -> tuple[list[PartnerSubResource], int]: ...
