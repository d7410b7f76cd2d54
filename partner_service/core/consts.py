"""Field keys, limits and defaults shared by the partner validation engines."""

from __future__ import annotations

# Error code table routing
PARTNER_ENDPOINT = "partners"
METHOD_POST = "post"
METHOD_PATCH = "patch"
METHOD_GET = "get"
METHOD_DELETE = "delete"

# Partner field keys
NAME_KEY = "name"
URL_KEY = "url"
LOGO_KEY = "logo"
FAVICON_KEY = "favicon"
LANGUAGE_KEY = "language"
BACKGROUND_COLOR_KEY = "background_color"
BACKGROUND_IMAGE_KEY = "background_image"
BROWSER_TITLE_KEY = "browser_title"
THEME_KEY = "theme_id"
LOGIN_PAGE_LOGO_KEY = "login_page_logo"
LOADER_KEY = "loader"
WEBSITE_URL_KEY = "website_url"
PROFILE_URL_KEY = "profile_url"
PAYMENT_URL_KEY = "payment_url"
LANDING_PAGE_KEY = "landing_page"
SITE_INFO_KEY = "site_info"
ALBUM_REVIEW_EMAIL_KEY = "album_review_email"
BUSINESS_MODEL_KEY = "business_model"
LOGIN_TYPE_KEY = "login_type"
PRODUCT_REVIEW_KEY = "product_review"
MEMBER_GRACE_PERIOD_KEY = "member_grace_period"
MEMBER_DEFAULT_COUNTRY_KEY = "member_default_country"
MUSIC_LANGUAGE_KEY = "music_language"
MOBILE_VERIFY_INTERVAL_KEY = "mobile_verify_interval"
EXPIRY_WARNING_COUNT_KEY = "expiry_warning_count"
FREE_PLAN_LIMIT_KEY = "free_plan_limit"
OUTLETS_PROCESSING_DURATION_KEY = "outlets_processing_duration"
PAYOUT_TARGET_CURRENCY_KEY = "payout_target_currency"
DEFAULT_PRICE_CODE_CURRENCY_KEY = "default_price_code_currency"
ENABLE_MAIL_KEY = "enable_mail"
MEMBER_PAY_TO_PARTNER_KEY = "member_pay_to_partner"

CONTACT_DETAILS_KEY = "contact_details"
CONTACT_PERSON_KEY = "contact_person"
EMAIL_KEY = "email"
NOREPLY_EMAIL_KEY = "noreply_email"
FEEDBACK_EMAIL_KEY = "feedback_email"
SUPPORT_EMAIL_KEY = "support_email"

ADDRESS_DETAILS_KEY = "address_details"
ADDRESS_KEY = "address"
STREET_KEY = "street"
COUNTRY_KEY = "country"
STATE_KEY = "state"
CITY_KEY = "city"
POSTAL_CODE_KEY = "postal_code"

SUBSCRIPTION_DETAILS_KEY = "subscription_details"
PLAN_ID_KEY = "plan_id"
PLAN_START_DATE_KEY = "plan_start_date"
PLAN_LAUNCH_DATE_KEY = "plan_launch_date"

PAYMENT_KEY = "payment"
PAYMENT_GATEWAY_KEY = "payment_gateway"
PAYMENT_GATEWAYS_KEY = "payment_gateways"
PAYMENT_GATEWAY_EMAIL_KEY = "payment_gateway_email"
CLIENT_ID_KEY = "client_id"
CLIENT_SECRET_KEY = "client_secret"
DEFAULT_PAYIN_CURRENCY_KEY = "default_payin_currency"
DEFAULT_PAYOUT_CURRENCY_KEY = "default_payout_currency"
PAYOUT_MIN_LIMIT_KEY = "payout_min_limit"
MAX_REMITTANCE_PER_MONTH_KEY = "max_remittance_per_month"
DEFAULT_CURRENCY_KEY = "default_currency"
PAYOUT_CURRENCY_KEY = "payout_currency"
DEFAULT_PAYMENT_GATEWAY_KEY = "default_payment_gateway"

# Sub-resources and query keys
PARTNER_ID_KEY = "partner_id"
MEMBER_ID_KEY = "member_id"
OAUTH_PROVIDER_KEY = "oauth_provider"
ENCRYPTION_KEY = "encryption_key"
TERMS_NAME_KEY = "terms_and_conditions_name"
TERMS_DESCRIPTION_KEY = "terms_and_conditions_description"
DESCRIPTION_KEY = "description"
FIELDS_KEY = "fields"
QUERY_KEY = "key"
PAGE_KEY = "page"
LIMIT_KEY = "limit"
SORT_KEY = "sort"
ORDER_KEY = "order"
STATUS_KEY = "status"
PRODUCT_TYPE_FIELD = "product_type"
TRACK_FILE_QUALITY_FIELD = "track_file_quality"

# Persistence table names
PARTNER_TABLE = "partner"
PARTNER_PLAN_TABLE = "partner_plan"
ID_KEY = "id"

# Lookup types served by the utility service
BUSINESS_LOOKUP_TYPE = "business_model"
LOGIN_LOOKUP_TYPE = "partner_login_type"
PRODUCT_REVIEW_LOOKUP_TYPE = "product_review"
INTERNAL_OAUTH_PROVIDER = "internal"

# Limits
PARTNER_NAME_MAX_LENGTH = 120
CONTACT_PERSON_MAX_LENGTH = 60
BROWSER_TITLE_MAX_LENGTH = 500
ADDRESS_MAX_LENGTH = 250
STREET_MAX_LENGTH = 120
CITY_MAX_LENGTH = 120
SITE_INFO_MAX_LENGTH = 2040
URL_MAX_LENGTH = 500
EMAIL_MAX_LENGTH = 120
TERMS_NAME_MAX_LENGTH = 250
MAX_EXPIRY_WARNING_COUNT = 20
MAX_FREE_PLAN_LIMIT = 100
MAX_REMITTANCE_PER_MONTH = 20
MIN_OUTLETS_PROCESSING_DURATION = 7
MAX_OUTLETS_PROCESSING_DURATION = 30
MIN_URL_LENGTH = 3
MAX_URL_LENGTH = 2083
CREDENTIAL_BYTE_SIZE = 32

SUPPORTED_CURRENCIES = frozenset({"INR", "USD", "JPY"})

# Defaults applied before create validation
LOGIN_PAGE_LOGO_DEFAULT = "LoginPageLogoDefaultvalue"
LOADER_DEFAULT = "LoaderDefaultvalue"
BACKGROUND_COLOR_DEFAULT = "#ffffff"
BACKGROUND_IMAGE_DEFAULT = "https://background.com/image"
LANGUAGE_DEFAULT = "en"
BROWSER_TITLE_DEFAULT = "browser title"
MOBILE_VERIFY_INTERVAL_DEFAULT = 1
PAYOUT_TARGET_CURRENCY_DEFAULT = "INR"
THEME_ID_DEFAULT = 1
LOGIN_TYPE_DEFAULT = "normal"
PAYOUT_MIN_LIMIT_DEFAULT = 1
PAYOUT_CURRENCY_DEFAULT = "USD"
MAX_REMITTANCE_PER_MONTH_DEFAULT = 2
MEMBER_GRACE_PERIOD_DEFAULT = "Quarterly"
EXPIRY_WARNING_COUNT_DEFAULT = 3
DEFAULT_PRICE_CODE_CURRENCY_DEFAULT = "INR"
MUSIC_LANGUAGE_DEFAULT = "en"
MEMBER_DEFAULT_COUNTRY_DEFAULT = "IN"
OUTLETS_PROCESSING_DURATION_DEFAULT = 10
FREE_PLAN_LIMIT_DEFAULT = 0
PRODUCT_REVIEW_DEFAULT = "Both"

# Listing
PAGE_DEFAULT = 1
LIMIT_DEFAULT = 10
MAX_LIMIT = 50
STATUS_ACTIVE = "active"
STATUS_INACTIVE = "inactive"
STATUS_ALL = "all"
ASCENDING = "asc"
DESCENDING = "desc"
PARTNER_LIST_KEYS = frozenset({NAME_KEY, COUNTRY_KEY, SORT_KEY, ORDER_KEY, STATUS_KEY, PAGE_KEY, LIMIT_KEY})
PARTNER_QUERY_KEYS = frozenset({SORT_KEY, ORDER_KEY, PAGE_KEY, LIMIT_KEY, FIELDS_KEY})
PARTNER_SORT_FIELDS = frozenset({NAME_KEY, EMAIL_KEY})
QUERY_SORT_FIELDS = frozenset({NAME_KEY})
SORT_ORDERS = frozenset({ASCENDING, DESCENDING})
STATUS_VALUES = frozenset({STATUS_ACTIVE, STATUS_INACTIVE, STATUS_ALL})

# Reference cache key prefixes
CURRENCY_ID_CACHE_KEY = "currency_id_"
COUNTRY_EXISTS_CACHE_KEY = "country_exists_"
LANGUAGE_EXISTS_CACHE_KEY = "language_exists_"
STATE_EXISTS_CACHE_KEY = "state_exists_"
LOOKUP_ID_CACHE_KEY = "lookup_id_"
SUB_DURATION_ID_CACHE_KEY = "subscription_id_"
THEME_CACHE_KEY = "theme_id_"
PAYMENT_GATEWAY_ID_CACHE_KEY = "payment_gateway_id_"
OAUTH_PROVIDER_CACHE_KEY = "oauth_provider_name_"
STORE_CACHE_KEY = "stores"
