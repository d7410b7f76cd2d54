from __future__ import annotations

from pydantic import BaseModel, Field


class ContactDetails(BaseModel):
    contact_person: str = ""
    email: str = ""
    noreply_email: str = ""
    feedback_email: str = ""
    support_email: str = ""


class AddressDetails(BaseModel):
    address: str = ""
    street: str = ""
    country: str = ""
    state: str = ""
    city: str = ""
    postal_code: str = ""


class SubscriptionPlanDetails(BaseModel):
    plan_id: str = ""
    plan_start_date: str = ""
    plan_launch_date: str = ""


class PaymentGateway(BaseModel):
    gateway: str = ""
    gateway_id: str = ""
    email: str = ""
    client_id: str = ""
    client_secret: str = ""
    payin: bool = False
    payout: bool = False
    default_payin_currency: str = ""
    default_payout_currency: str = ""


class PaymentGatewayDetails(BaseModel):
    payment_gateways: list[PaymentGateway] = Field(default_factory=list)
    payout_min_limit: int = 0
    max_remittance_per_month: int = 0
    default_currency: str = ""
    default_payment_gateway: str = ""


class PartnerRecord(BaseModel):
    """Canonical partner entity. Zero values mean "unset" for create defaulting."""

    id: str | None = None

    # Identity
    name: str = ""
    url: str = ""
    logo: str = ""
    favicon: str = ""
    language: str = ""

    # Presentation
    background_color: str = ""
    background_image: str = ""
    browser_title: str = ""
    theme_id: int = 0
    login_page_logo: str = ""
    loader: str = ""
    website_url: str = ""
    profile_url: str = ""
    payment_url: str = ""
    landing_page: str = ""
    site_info: str = ""

    contact_details: ContactDetails = Field(default_factory=ContactDetails)
    album_review_email: str = ""
    address_details: AddressDetails = Field(default_factory=AddressDetails)
    subscription_details: SubscriptionPlanDetails = Field(default_factory=SubscriptionPlanDetails)
    payment: PaymentGatewayDetails = Field(default_factory=PaymentGatewayDetails)

    # Business attributes
    business_model: str = ""
    login_type: str = ""
    product_review: str = ""
    member_grace_period: str = ""
    member_default_country: str = ""
    music_language: str = ""
    mobile_verify_interval: int = 0
    expiry_warning_count: int = 0
    free_plan_limit: int = 0
    outlets_processing_duration: int = 0
    payout_target_currency: str = ""
    default_price_code_currency: str = ""
    enable_mail: bool = False
    member_pay_to_partner: bool = False

    # Resolved identifiers
    business_model_id: int = 0
    login_type_id: int = 0
    product_review_id: int = 0
    member_grace_period_id: int = 0
    payout_target_currency_id: int = 0
    default_price_code_currency_id: int = 0
    default_currency_id: int = 0
    default_payment_gateway_id: str = ""


# Sparse update models: presence is whatever lands in ``model_fields_set``.

class ContactDetailsUpdate(BaseModel):
    contact_person: str | None = None
    email: str | None = None
    noreply_email: str | None = None
    feedback_email: str | None = None
    support_email: str | None = None


class AddressDetailsUpdate(BaseModel):
    address: str | None = None
    street: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    postal_code: str | None = None


class SubscriptionPlanUpdate(BaseModel):
    plan_id: str | None = None
    plan_start_date: str | None = None
    plan_launch_date: str | None = None


class PaymentUpdate(BaseModel):
    payment_gateways: list[PaymentGateway] | None = None
    payout_min_limit: int | None = None
    max_remittance_per_month: int | None = None
    default_currency: str | None = None
    default_payment_gateway: str | None = None


class PartnerUpdate(BaseModel):
    name: str | None = None
    url: str | None = None
    logo: str | None = None
    favicon: str | None = None
    language: str | None = None

    background_color: str | None = None
    background_image: str | None = None
    browser_title: str | None = None
    theme_id: int | None = None
    login_page_logo: str | None = None
    loader: str | None = None
    website_url: str | None = None
    profile_url: str | None = None
    payment_url: str | None = None
    landing_page: str | None = None
    site_info: str | None = None

    contact_details: ContactDetailsUpdate | None = None
    album_review_email: str | None = None
    address_details: AddressDetailsUpdate | None = None
    subscription_details: SubscriptionPlanUpdate | None = None
    payment: PaymentUpdate | None = None

    business_model: str | None = None
    login_type: str | None = None
    product_review: str | None = None
    member_grace_period: str | None = None
    member_default_country: str | None = None
    music_language: str | None = None
    mobile_verify_interval: int | None = None
    expiry_warning_count: int | None = None
    free_plan_limit: int | None = None
    outlets_processing_duration: int | None = None
    payout_target_currency: str | None = None
    default_price_code_currency: str | None = None
    enable_mail: bool | None = None
    member_pay_to_partner: bool | None = None


class PartnerStatusUpdate(BaseModel):
    active: bool


class PartnerListItem(BaseModel):
    id: str
    name: str
    url: str = ""
    logo: str = ""
    email: str = ""
    country: str = ""
    active: bool = True


class PartnerStores(BaseModel):
    stores: list[str] = Field(default_factory=list)


class StoreData(BaseModel):
    store_id: str
    name: str
