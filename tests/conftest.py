import uuid
from collections import Counter, defaultdict
from urllib.parse import unquote

import httpx
import pytest
import pytest_asyncio
from cryptography.fernet import Fernet

from partner_service.core import consts
from partner_service.core.config import Settings
from partner_service.core.errors import CacheError
from partner_service.schemas.listing import PartnerSubResource
from partner_service.schemas.oauth import PartnerOAuthCredential
from partner_service.schemas.partner import (
    AddressDetails,
    ContactDetails,
    PartnerListItem,
    PartnerRecord,
    PartnerStores,
    PaymentGateway,
    PaymentGatewayDetails,
)
from partner_service.schemas.terms import TermsAndConditions
from partner_service.services.http_client import ReferenceHttpClient
from partner_service.services.partners import PartnerService
from partner_service.services.resolver import ReferenceResolver


class DictCache:
    def __init__(self, *, fail_on_set: bool = False):
        self.data: dict[str, str] = {}
        self.fail_on_set = fail_on_set
        self.sets = 0

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, *, ttl_seconds):
        self.sets += 1
        if self.fail_on_set:
            raise CacheError(f"cache write failed for {key}: down")
        self.data[key] = value


class ReferenceServices:
    """Canned answers for the utility, subscription, oauth, store and member services."""

    def __init__(self):
        self.countries = {"IN", "US"}
        self.states = {("IN", "KA")}
        self.languages = {"en", "hi"}
        self.currencies = {"INR": 1, "USD": 2, "JPY": 3}
        self.lookups = {
            (consts.BUSINESS_LOOKUP_TYPE, "Subscription"): 11,
            (consts.LOGIN_LOOKUP_TYPE, "normal"): 21,
            (consts.PRODUCT_REVIEW_LOOKUP_TYPE, "Both"): 31,
        }
        self.gateways = {"paypal": "gw-paypal", "stripe": "gw-stripe"}
        self.durations = {"Quarterly": 4, "Monthly": 1}
        self.themes = {1: "classic", 2: "dark"}
        self.oauth_providers = {"internal": "prov-internal"}
        self.stores = [
            {"store_id": "s-1", "name": "Spotify"},
            {"store_id": "s-2", "name": "Deezer"},
            {"store_id": "s-3", "name": "Tidal"},
        ]
        self.members: set[str] = set()
        self.hits: Counter = Counter()
        self.paths: list[str] = []
        self.down = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.down:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.raw_path.decode("ascii").split("?")[0]
        self.paths.append(path)
        parts = [unquote(p) for p in path.strip("/").split("/")][2:]  # drop "api/v1"
        q = request.url.params
        self.hits[parts[0]] += 1

        def found(ok, payload=None):
            if not ok:
                return httpx.Response(404, json={"message": "not found"})
            return httpx.Response(200, json=payload) if payload is not None else httpx.Response(200)

        head, rest = parts[0], parts[1:]
        if head == "countries" and rest == ["exists"]:
            return found(True, {"data": {"exists": q.get("iso") in self.countries}})
        if head == "countries" and len(rest) == 3:
            return found((rest[0], rest[2]) in self.states)
        if head == "languages":
            return found(rest[-1] in self.languages)
        if head == "currencies":
            iso = rest[-1]
            return found(iso in self.currencies, {"data": {"id": self.currencies.get(iso)}})
        if head == "lookup":
            lookup_id = self.lookups.get((rest[-1], q.get("value")))
            return found(lookup_id is not None, {"data": [{"id": lookup_id}]})
        if head == "payment_gateway":
            gw = self.gateways.get(q.get("name"))
            return found(True, {"data": {"records": [{"id": gw}] if gw else []}})
        if head == "subscriptions":
            d = self.durations.get(q.get("name"))
            return found(True, {"data": {"records": [{"id": d}] if d else []}})
        if head == "theme":
            name = self.themes.get(int(rest[0]))
            return found(name is not None, {"data": {"name": name}})
        if head == "oauth":
            pid = self.oauth_providers.get(q.get("provider"))
            return found(pid is not None, {"data": {"provider_id": pid}})
        if head == "stores":
            return found(True, {"data": self.stores})
        if head == "members":
            return found(rest[0] in self.members, {"data": {"id": rest[0]}})
        return httpx.Response(404)


class FakeRepository:
    def __init__(self):
        self.partners: dict[str, PartnerRecord] = {}
        self.taken: dict[str, set[str]] = defaultdict(set)
        self.plans = {"plan-gold"}
        self.credentials: dict[tuple[str, str], PartnerOAuthCredential] = {}
        self.status: dict[str, bool] = {}
        self.terms: dict[str, TermsAndConditions] = {}
        self.stores: dict[str, list[str]] = {}
        self.list_items: list[PartnerListItem] = []
        self.product_types: list[PartnerSubResource] = []
        self.track_file_quality: list[PartnerSubResource] = []
        self.calls: Counter = Counter()
        self.last_update = None
        self.last_terms_update = None

    async def is_field_value_unique(self, field, value, exclude_id):
        self.calls["is_field_value_unique"] += 1
        return value not in self.taken[field]

    async def is_exists(self, table, field, value):
        self.calls["is_exists"] += 1
        return value in self.taken[field]

    async def get_id(self, table, field, value):
        self.calls["get_id"] += 1
        if table == consts.PARTNER_PLAN_TABLE and value in self.plans:
            return value
        return None

    async def create_partner(self, record, credential):
        self.calls["create_partner"] += 1
        partner_id = str(uuid.uuid4())
        self.partners[partner_id] = record.model_copy(update={"id": partner_id}, deep=True)
        self.credentials[(partner_id, credential.provider_id)] = credential
        return partner_id

    async def update_partner(self, partner_id, actor_id, record, redacted_payload):
        self.calls["update_partner"] += 1
        self.partners[partner_id] = record
        self.last_update = (partner_id, actor_id, record, redacted_payload)

    async def get_by_id(self, partner_id):
        self.calls["get_by_id"] += 1
        record = self.partners.get(partner_id)
        return record.model_copy(deep=True) if record else None

    async def get_all(self, params):
        self.calls["get_all"] += 1
        return self.list_items[params.offset:params.offset + params.limit], len(self.list_items)

    async def delete(self, partner_id):
        self.calls["delete"] += 1
        self.partners.pop(partner_id, None)

    async def is_partner_exists(self, partner_id):
        self.calls["is_partner_exists"] += 1
        return partner_id in self.partners

    async def get_partner_name(self, partner_id):
        return self.partners[partner_id].name

    async def update_partner_status(self, partner_id, active):
        self.calls["update_partner_status"] += 1
        self.status[partner_id] = active

    async def get_partner_oauth_credential(self, partner_id, provider_id):
        return self.credentials[(partner_id, provider_id)]

    async def get_all_terms_and_conditions(self, partner_id):
        return self.terms.get(partner_id, TermsAndConditions(partner_id=partner_id))

    async def update_terms_and_conditions(self, partner_id, actor_id, payload):
        self.calls["update_terms_and_conditions"] += 1
        self.last_terms_update = (partner_id, actor_id, payload)

    async def create_partner_stores(self, partner_id, stores):
        self.stores.setdefault(partner_id, []).extend(stores.stores)
        return list(stores.stores)

    async def get_partner_stores(self, partner_id):
        return PartnerStores(stores=self.stores.get(partner_id, []))

    async def get_partner_payment_gateways(self, partner_id):
        return self.partners[partner_id].payment.payment_gateways

    async def get_partner_product_types(self, partner_id, params):
        self.calls["get_partner_product_types"] += 1
        rows = self.product_types
        return rows[params.offset:params.offset + params.limit], len(rows)

    async def get_partner_track_file_quality(self, partner_id, params):
        self.calls["get_partner_track_file_quality"] += 1
        rows = self.track_file_quality
        return rows[params.offset:params.offset + params.limit], len(rows)


def build_record(**overrides) -> PartnerRecord:
    record = PartnerRecord(
        name="Acme Music",
        url="https://acmemusic.com",
        logo="https://cdn.acmemusic.com/logo.png",
        business_model="Subscription",
        contact_details=ContactDetails(
            contact_person="Jo Doe",
            email="owner@acmemusic.com",
            noreply_email="noreply@acmemusic.com",
            support_email="support@acmemusic.com",
            feedback_email="feedback@acmemusic.com",
        ),
        album_review_email="review@acmemusic.com",
        address_details=AddressDetails(address="1 Main Road", country="IN", state="KA", city="Bengaluru"),
        payment=PaymentGatewayDetails(
            payment_gateways=[
                PaymentGateway(
                    gateway="paypal",
                    email="pay@acmemusic.com",
                    client_id="cid",
                    client_secret="csecret",
                    payin=True,
                    payout=True,
                    default_payin_currency="USD",
                    default_payout_currency="USD",
                )
            ],
            default_payment_gateway="paypal",
        ),
    )
    return record.model_copy(update=overrides)


@pytest.fixture
def fernet_key():
    return Fernet.generate_key().decode("utf-8")


@pytest.fixture
def test_settings(fernet_key):
    return Settings(credentials_encryption_key=fernet_key, cache_ttl_seconds=30)


@pytest.fixture
def reference():
    return ReferenceServices()


@pytest.fixture
def cache():
    return DictCache()


@pytest.fixture
def failing_cache():
    return DictCache(fail_on_set=True)


@pytest.fixture
def repo():
    return FakeRepository()


@pytest_asyncio.fixture
async def http_client(reference):
    client = ReferenceHttpClient(transport=httpx.MockTransport(reference.handler))
    try:
        yield client
    finally:
        await client.aclose()


@pytest.fixture
def resolver(cache, http_client, test_settings):
    return ReferenceResolver(cache=cache, http=http_client, settings=test_settings)


@pytest.fixture
def service(repo, resolver, fernet_key):
    return PartnerService(repo=repo, resolver=resolver, encryption_key=fernet_key)


@pytest_asyncio.fixture
async def stored_partner(repo):
    partner_id = str(uuid.uuid4())
    record = build_record(id=partner_id)
    record.theme_id = 1
    record.language = "en"
    repo.partners[partner_id] = record
    return partner_id


@pytest.fixture
def make_record():
    return build_record
