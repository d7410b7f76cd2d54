import pytest

from partner_service.core.errors import ServiceConnectionError
from partner_service.schemas.partner import PartnerUpdate
from partner_service.services.partner_update import PartnerUpdateEngine
from partner_service.services.redaction import REDACTED
from partner_service.services.violations import ViolationKind


@pytest.fixture
def engine(repo, resolver):
    return PartnerUpdateEngine(repo=repo, resolver=resolver)


async def _run(engine, repo, partner_id, payload):
    base = repo.partners[partner_id]
    return await engine.validate(
        partner_id=partner_id,
        update=PartnerUpdate.model_validate(payload),
        base=base,
        endpoint="partners",
        method="patch",
    )


@pytest.mark.asyncio
async def test_absent_fields_are_left_untouched(engine, repo, stored_partner):
    base = repo.partners[stored_partner].model_copy(deep=True)

    report, work = await _run(engine, repo, stored_partner, {"browser_title": "Acme Studio"})

    assert not report
    assert work.browser_title == "Acme Studio"
    expected = base.model_dump()
    expected["browser_title"] = "Acme Studio"
    assert work.model_dump() == expected
    # base is never mutated
    assert repo.partners[stored_partner].browser_title == base.browser_title


@pytest.mark.asyncio
async def test_nested_group_only_checks_present_keys(engine, repo, stored_partner):
    report, work = await _run(engine, repo, stored_partner, {"address_details": {"city": "Mysuru"}})

    assert not report
    assert work.address_details.city == "Mysuru"
    assert work.address_details.address == "1 Main Road"
    assert work.address_details.country == "IN"


@pytest.mark.asyncio
async def test_invalid_email_never_reaches_uniqueness(engine, repo, stored_partner):
    report, work = await _run(engine, repo, stored_partner, {"contact_details": {"email": "not-an-email"}})

    assert report.kind_of("email") is ViolationKind.INVALID
    assert report.get("email").code == "P1073"
    assert repo.calls["is_field_value_unique"] == 0
    assert work.contact_details.email == "owner@acmemusic.com"


@pytest.mark.asyncio
async def test_taken_email_is_already_exists(engine, repo, stored_partner):
    repo.taken["support_email"].add("help@acmemusic.com")

    report, _ = await _run(engine, repo, stored_partner, {"contact_details": {"support_email": "help@acmemusic.com"}})

    assert report.kind_of("support_email") is ViolationKind.ALREADY_EXISTS
    assert repo.calls["is_field_value_unique"] == 1


@pytest.mark.asyncio
async def test_name_length_is_measured_after_trimming(engine, repo, stored_partner):
    report, work = await _run(engine, repo, stored_partner, {"name": "  " + "a" * 120 + "  "})
    assert not report
    assert work.name == "a" * 120

    report, _ = await _run(engine, repo, stored_partner, {"name": "a" * 121})
    assert report.kind_of("name") is ViolationKind.LIMIT_EXCEEDED
    assert repo.calls["is_field_value_unique"] == 1


@pytest.mark.asyncio
async def test_present_empty_required_field_is_required(engine, repo, stored_partner):
    report, _ = await _run(engine, repo, stored_partner, {"name": "", "business_model": ""})

    assert report.kind_of("name") is ViolationKind.REQUIRED
    assert report.kind_of("business_model") is ViolationKind.REQUIRED


@pytest.mark.asyncio
async def test_zero_and_empty_reset_to_defaults(engine, repo, stored_partner):
    repo.partners[stored_partner].expiry_warning_count = 9
    repo.partners[stored_partner].browser_title = "custom"

    report, work = await _run(engine, repo, stored_partner, {"expiry_warning_count": 0, "browser_title": ""})

    assert not report
    assert work.expiry_warning_count == 3
    assert work.browser_title == "browser title"


@pytest.mark.asyncio
async def test_out_of_range_numbers(engine, repo, stored_partner):
    report, _ = await _run(
        engine,
        repo,
        stored_partner,
        {"expiry_warning_count": 21, "outlets_processing_duration": 31, "mobile_verify_interval": -1},
    )

    assert report.kind_of("expiry_warning_count") is ViolationKind.INVALID
    assert report.kind_of("outlets_processing_duration") is ViolationKind.LIMIT_EXCEEDED
    assert report.kind_of("mobile_verify_interval") is ViolationKind.INVALID


@pytest.mark.asyncio
async def test_reference_lookups_resolve_ids(engine, repo, stored_partner):
    report, work = await _run(
        engine,
        repo,
        stored_partner,
        {
            "payout_target_currency": "JPY",
            "member_grace_period": "Monthly",
            "theme_id": 2,
            "subscription_details": {"plan_id": "plan-gold"},
        },
    )

    assert not report
    assert work.payout_target_currency_id == 3
    assert work.member_grace_period_id == 1
    assert work.theme_id == 2
    assert work.subscription_details.plan_id == "plan-gold"


@pytest.mark.asyncio
async def test_unknown_references_are_invalid(engine, repo, stored_partner):
    report, _ = await _run(
        engine,
        repo,
        stored_partner,
        {
            "language": "xx",
            "theme_id": 99,
            "address_details": {"country": "ZZ"},
            "subscription_details": {"plan_id": "plan-none"},
        },
    )

    assert set(report) == {"language", "theme_id", "country", "plan_id"}


@pytest.mark.asyncio
async def test_state_checked_against_new_country(engine, repo, stored_partner):
    report, _ = await _run(engine, repo, stored_partner, {"address_details": {"country": "US", "state": "KA"}})
    assert report.kind_of("state") is ViolationKind.INVALID


@pytest.mark.asyncio
async def test_payin_violation_does_not_block_default_gateway(engine, repo, stored_partner):
    payload = {
        "payment": {
            "payment_gateways": [
                {
                    "gateway": "paypal",
                    "email": "pay@acmemusic.com",
                    "client_id": "cid",
                    "client_secret": "secret",
                    "default_payin_currency": "EUR",
                    "default_payout_currency": "USD",
                }
            ],
            "default_payment_gateway": "paypal",
        }
    }
    report, work = await _run(engine, repo, stored_partner, payload)

    assert set(report) == {"default_payin_currency"}
    assert work.default_payment_gateway_id == "gw-paypal"
    assert work.payment.payment_gateways[0].gateway_id == "gw-paypal"


@pytest.mark.asyncio
async def test_gateway_rules_report_first_offender_per_rule(engine, repo, stored_partner):
    gateways = [
        {"gateway": "venmo", "client_id": "a", "client_secret": "b",
         "default_payin_currency": "USD", "default_payout_currency": "USD"},
        {"gateway": "stripe", "client_id": "c", "client_secret": "d", "email": "bad",
         "default_payin_currency": "USD", "default_payout_currency": "GBP"},
        {"gateway": "paypal", "client_id": "", "client_secret": "f", "email": "x@acmemusic.com",
         "default_payin_currency": "USD", "default_payout_currency": "GBP"},
    ]
    report, work = await _run(engine, repo, stored_partner, {"payment": {"payment_gateways": gateways}})

    assert report.kind_of("payment_gateway") is ViolationKind.INVALID
    assert report.kind_of("payment_gateway_email") is ViolationKind.REQUIRED
    assert report.kind_of("client_id") is ViolationKind.REQUIRED
    assert report.kind_of("default_payout_currency") is ViolationKind.INVALID
    assert "client_secret" not in report
    # resolution carries on past the unknown gateway
    assert [gw.gateway_id for gw in work.payment.payment_gateways] == ["", "gw-stripe", "gw-paypal"]


@pytest.mark.asyncio
async def test_default_gateway_must_be_listed(engine, repo, stored_partner):
    report, _ = await _run(engine, repo, stored_partner, {"payment": {"default_payment_gateway": "stripe"}})
    assert report.kind_of("default_payment_gateway") is ViolationKind.INVALID

    report, _ = await _run(engine, repo, stored_partner, {"payment": {"default_payment_gateway": ""}})
    assert report.kind_of("default_payment_gateway") is ViolationKind.REQUIRED


STRIPE_ONLY = {
    "payment": {
        "payment_gateways": [
            {"gateway": "stripe", "email": "pay@acmemusic.com", "client_id": "cid",
             "client_secret": "cs", "default_payin_currency": "INR",
             "default_payout_currency": "INR"},
        ],
    },
}


@pytest.mark.asyncio
async def test_new_gateway_list_must_keep_stored_default(engine, repo, stored_partner):
    assert repo.partners[stored_partner].payment.default_payment_gateway == "paypal"

    report, _ = await _run(engine, repo, stored_partner, STRIPE_ONLY)

    assert set(report) == {"default_payment_gateway"}
    assert report.kind_of("default_payment_gateway") is ViolationKind.INVALID
    assert report.get("default_payment_gateway").code == "P1167"


@pytest.mark.asyncio
async def test_new_gateway_list_with_listed_default_refreshes_its_id(engine, repo, stored_partner):
    payload = {"payment": {"payment_gateways": [
        {"gateway": "paypal", "email": "pay@acmemusic.com", "client_id": "cid",
         "client_secret": "cs", "default_payin_currency": "USD",
         "default_payout_currency": "USD"},
    ]}}
    report, work = await _run(engine, repo, stored_partner, payload)

    assert not report
    assert work.payment.default_payment_gateway == "paypal"
    assert work.default_payment_gateway_id == "gw-paypal"


@pytest.mark.asyncio
async def test_empty_gateway_list_is_required(engine, repo, stored_partner):
    report, _ = await _run(engine, repo, stored_partner, {"payment": {"payment_gateways": []}})

    assert report.kind_of("payment_gateway") is ViolationKind.REQUIRED
    assert report.get("payment_gateway").code == "P1139"


@pytest.mark.asyncio
async def test_service_rejects_gateway_list_dropping_default(service, repo, stored_partner):
    result = await service.update_partner(stored_partner, "actor-1", PartnerUpdate.model_validate(STRIPE_ONLY))

    assert not result.ok
    assert result.violations.kind_of("default_payment_gateway") is ViolationKind.INVALID
    assert repo.calls["update_partner"] == 0
    assert repo.partners[stored_partner].payment.default_payment_gateway == "paypal"


@pytest.mark.asyncio
async def test_default_currency_uses_payout_currency_key(engine, repo, stored_partner):
    report, _ = await _run(engine, repo, stored_partner, {"payment": {"default_currency": "EUR"}})
    assert set(report) == {"payout_currency"}


@pytest.mark.asyncio
async def test_service_update_persists_redacted_payload(service, repo, stored_partner):
    update = PartnerUpdate.model_validate({
        "name": "Acme Records",
        "payment": {
            "payment_gateways": [
                {"gateway": "stripe", "email": "pay@acmemusic.com", "client_id": "cid",
                 "client_secret": "topsecret", "default_payin_currency": "INR",
                 "default_payout_currency": "INR"},
            ],
            "default_payment_gateway": "stripe",
        },
    })

    result = await service.update_partner(stored_partner, "actor-1", update)

    assert result.ok
    assert repo.calls["update_partner"] == 1
    partner_id, actor_id, record, redacted = repo.last_update
    assert (partner_id, actor_id) == (stored_partner, "actor-1")
    assert record.name == "Acme Records"
    assert record.default_payment_gateway_id == "gw-stripe"
    assert redacted["payment"]["payment_gateways"][0]["client_secret"] == REDACTED
    assert "browser_title" not in redacted


@pytest.mark.asyncio
async def test_service_update_with_violations_does_not_persist(service, repo, stored_partner):
    result = await service.update_partner(stored_partner, "actor-1", PartnerUpdate(url="nope"))

    assert not result.ok
    assert result.violations.kind_of("url") is ViolationKind.INVALID
    assert repo.calls["update_partner"] == 0


@pytest.mark.asyncio
async def test_service_update_unknown_partner(service, repo):
    result = await service.update_partner("2f1e7b1c-2b8e-4b9f-9d3c-1f6c2a7e5d10", "actor-1", PartnerUpdate(name="X"))
    assert result.violations.kind_of("partner_id") is ViolationKind.NOT_FOUND

    result = await service.update_partner("bad-id", "actor-1", PartnerUpdate(name="X"))
    assert result.violations.kind_of("partner_id") is ViolationKind.INVALID


@pytest.mark.asyncio
async def test_service_update_with_reference_outage_raises(service, repo, reference, stored_partner):
    reference.down = True

    with pytest.raises(ServiceConnectionError):
        await service.update_partner(stored_partner, "actor-1", PartnerUpdate(language="hi"))

    assert repo.calls["update_partner"] == 0
    assert repo.partners[stored_partner].language == "en"
