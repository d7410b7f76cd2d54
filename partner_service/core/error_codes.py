"""
Error code table.

Maps endpoint -> method -> field -> violation kind -> code. Kinds use the
values of ``ViolationKind`` (required, invalid, already_exists,
limit_exceeded, not_found).
"""

from __future__ import annotations

from typing import Mapping

from partner_service.core.errors import ErrorCodeNotFound

CodeTable = Mapping[str, Mapping[str, Mapping[str, Mapping[str, str]]]]

_R = "required"
_I = "invalid"
_E = "already_exists"
_L = "limit_exceeded"
_N = "not_found"

_MEMBER_ID = {_R: "P1192", _N: "P1193", _I: "P1194"}

ERROR_CODES: CodeTable = {
    "partners": {
        "post": {
            "name": {_R: "P1001", _E: "P1002", _L: "P1003", _I: "P1004"},
            "url": {_R: "P1005", _I: "P1006", _E: "P1007", _L: "P1154"},
            "logo": {_R: "P1008", _I: "P1009"},
            "business_model": {_R: "P2001", _I: "P1010"},
            "contact_person": {_R: "P1011", _L: "P1012"},
            "email": {_R: "P1013", _I: "P1014", _E: "P1015", _L: "P1155"},
            "support_email": {_R: "P1019", _E: "P1020", _I: "P1021", _L: "P1157"},
            "feedback_email": {_R: "P1022", _E: "P1023", _I: "P1024"},
            "album_review_email": {_R: "P1025", _E: "P1026", _I: "P1027", _L: "P1158"},
            "address": {_R: "P1028", _L: "P1029"},
            "country": {_R: "P2003", _I: "P1030"},
            "payment_gateway": {_I: "P1031", _R: "P1032"},
            "favicon": {_R: "P1033"},
            "free_plan_limit": {_I: "P1034"},
            "expiry_warning_count": {_I: "P1035"},
            "max_remittance_per_month": {_I: "P1036"},
            "outlets_processing_duration": {_L: "P1037"},
            "background_color": {_I: "P1038"},
            "background_image": {_I: "P2234"},
            "currency": {_I: "P1039"},
            "payout_target_currency": {_I: "P1040"},
            "state": {_I: "P1041"},
            "default_price_code_currency": {_I: "P1043"},
            "music_language": {_I: "P1044"},
            "member_default_country": {_I: "P1045"},
            "member_grace_period": {_I: "P1046"},
            "language": {_I: "P1047"},
            "product_review": {_I: "P1048"},
            "login_type": {_I: "P1049"},
            "noreply_email": {_R: "P1050", _E: "P1051", _I: "P1052", _L: "P1159"},
            "website_url": {_I: "P1053", _E: "P1054", _L: "P1160"},
            "landing_page": {_E: "P1055", _I: "P1056", _L: "P1161"},
            "profile_url": {_I: "P1057", _L: "P1162"},
            "payment_url": {_I: "P1058", _L: "P1163"},
            "city": {_L: "P1059"},
            "street": {_L: "P1060"},
            "browser_title": {_L: "P1061"},
            "payout_currency": {_I: "P1062"},
            "postal_code": {_I: "P1063"},
            "payment_gateway_email": {_I: "P1064", _R: "P1065"},
            "default_payin_currency": {_I: "P1066", _R: "P1067"},
            "default_payout_currency": {_I: "P1068", _R: "P1069"},
            "client_id": {_R: "P1070"},
            "client_secret": {_R: "P1071"},
            "site_info": {_L: "P1072"},
            "default_payment_gateway": {_R: "P1164", _I: "P1165", _N: "P1675"},
            "mobile_verify_interval": {_I: "P3456"},
            "theme_id": {_I: "P3456"},
            "payout_min_limit": {_I: "P1822"},
        },
        "patch": {
            "email": {_I: "P1073", _R: "P1074", _E: "P1075", _L: "P1162"},
            "url": {_I: "P1076", _R: "P1077", _E: "P1078", _L: "P1163"},
            "website_url": {_I: "P1079", _E: "P1080", _L: "P1164"},
            "profile_url": {_I: "P1081", _L: "P1165"},
            "payment_url": {_I: "P1082", _L: "P1166"},
            "payout_min_limit": {_I: "P1822"},
            "landing_page": {_I: "P1083", _E: "P1084", _L: "P1167"},
            "feedback_email": {_I: "P1088", _R: "P1089", _E: "P1090", _L: "P1169"},
            "support_email": {_I: "P1091", _E: "P1092", _R: "P1093"},
            "album_review_email": {_I: "P1094", _R: "P1095", _E: "P1096", _L: "P1170"},
            "name": {_E: "P1097", _I: "P1098", _L: "P1099", _R: "P1101"},
            "language": {_I: "P1102", _R: "p0987"},
            "country": {_R: "P2004", _I: "P1103"},
            "state": {_I: "P1104"},
            "music_language": {_I: "P1105"},
            "member_default_country": {_I: "P1106"},
            "payout_currency": {_I: "P1107"},
            "default_price_code_currency": {_I: "P1108"},
            "payout_target_currency": {_I: "P1110"},
            "member_grace_period": {_I: "P1111"},
            "plan_id": {_I: "P1112"},
            "background_color": {_I: "P1113"},
            "background_image": {_I: "P1114"},
            "partner_id": {_N: "P1115", _I: "P3452"},
            "business_model": {_R: "P2002", _I: "P1116"},
            "product_review": {_I: "P1117"},
            "login_type": {_I: "P1118"},
            "expiry_warning_count": {_I: "P1119"},
            "free_plan_limit": {_I: "P1120"},
            "max_remittance_per_month": {_I: "P1121"},
            "outlets_processing_duration": {_L: "P1122"},
            "contact_person": {_I: "P1123", _L: "P1124"},
            "browser_title": {_L: "P1125"},
            "address": {_L: "P1126", _R: "P1127"},
            "street": {_L: "P1128"},
            "city": {_L: "P1129"},
            "logo": {_R: "p1234", _I: "P1130"},
            "postal_code": {_I: "P1131"},
            "noreply_email": {_R: "P1132", _E: "P1133", _I: "P1134", _L: "P1171"},
            "default_payin_currency": {_I: "P1135", _R: "P1136"},
            "default_payout_currency": {_I: "P1137", _R: "P1138"},
            "payment_gateway": {_R: "P1139"},
            "payment_gateway_email": {_I: "P1240", _R: "P1140"},
            "client_id": {_R: "P1141"},
            "client_secret": {_R: "P1142"},
            "site_info": {_L: "P1143"},
            "terms_and_conditions_description": {_R: "P1167"},
            "terms_and_conditions_name": {_L: "P1299", _R: "P1201"},
            "default_payment_gateway": {_R: "P1166", _I: "P1167", _N: "P1612"},
            "mobile_verify_interval": {_I: "P3456"},
            "theme_id": {_I: "P3456"},
            "member_id": dict(_MEMBER_ID),
        },
        "get": {
            "page": {_I: "P1144"},
            "partner_id": {_I: "P2453", _E: "P1145", _N: "P2762"},
            "key": {_I: "P1146"},
            "sort": {_I: "P1147", _R: "P1148"},
            "order": {_I: "P1149"},
            "active": {_I: "P1150"},
            "limit": {_I: "P1151"},
            "status": {_I: "P1152"},
            "country": {_I: "P1153"},
            "encryption_key": {_I: "P2121"},
            "oauth_provider": {_I: "P00345", _R: "P12367"},
            "member_id": dict(_MEMBER_ID),
            "fields": {_I: "P8888"},
        },
        "delete": {
            "partner_id": {_I: "P1144", _N: "P4563"},
            "member_id": dict(_MEMBER_ID),
        },
    },
}


def get_error_code(
    table: CodeTable,
    endpoint: str,
    method: str,
    field: str,
    kind: str,
) -> str:
    """Resolve a code, raising ErrorCodeNotFound naming the first missing level."""
    try:
        methods = table[endpoint]
    except KeyError:
        raise ErrorCodeNotFound(f"unknown endpoint {endpoint!r}") from None
    try:
        fields = methods[method.lower()]
    except KeyError:
        raise ErrorCodeNotFound(f"unknown method {method!r} for {endpoint!r}") from None
    try:
        kinds = fields[field]
    except KeyError:
        raise ErrorCodeNotFound(f"no codes for field {field!r} on {method} {endpoint}") from None
    try:
        return kinds[kind]
    except KeyError:
        raise ErrorCodeNotFound(f"no {kind!r} code for field {field!r} on {method} {endpoint}") from None


class ErrorCodeLookup:
    def __init__(self, table: CodeTable = ERROR_CODES):
        self._table = table

    def get_code(self, endpoint: str, method: str, field: str, kind: str) -> str:
        return get_error_code(self._table, endpoint, method, field, kind)
