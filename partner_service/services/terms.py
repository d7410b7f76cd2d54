from __future__ import annotations

from partner_service.core import consts
from partner_service.schemas.terms import TermsAndConditionsUpdate
from partner_service.services.validators import max_length, non_empty
from partner_service.services.violations import ViolationReport


def validate_terms_update(payload: TermsAndConditionsUpdate, report: ViolationReport) -> None:
    """Check the keys present in a terms and conditions update."""
    present = payload.model_fields_set

    if "name" in present:
        if not non_empty(payload.name):
            report.required(consts.TERMS_NAME_KEY)
        elif not max_length(payload.name or "", consts.TERMS_NAME_MAX_LENGTH):
            report.limit_exceeded(consts.TERMS_NAME_KEY)

    if "description" in present and not non_empty(payload.description):
        report.required(consts.TERMS_DESCRIPTION_KEY)

    if "language" in present and not non_empty(payload.language):
        report.required(consts.LANGUAGE_KEY)
