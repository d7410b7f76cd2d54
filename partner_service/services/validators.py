"""
Pure field validators.

Each function inspects a primitive value and answers yes/no (or returns a
transformed value). None of them do I/O or record violations: the engines
decide which field/code a failure maps to.
"""

from __future__ import annotations

import html
import re
import uuid
from typing import Collection
from urllib.parse import urlsplit

from email_validator import EmailNotValidError, validate_email

from partner_service.core.consts import MAX_URL_LENGTH, MIN_URL_LENGTH

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_NAME = re.compile(r"^[a-zA-Z0-9\- '.,]+$")
_POSTAL_CODE = re.compile(r"^[a-zA-Z0-9\s\-]{4,10}$")

_URL_SCHEMA = r"((ftp|tcp|udp|wss?|https?)://)"
_URL_USERNAME = r"([^\s/@]+(:[^\s/@]*)?@)"
_URL_IP = (
    r"([1-9]\d?|1\d\d|2[01]\d|22[0-3]|24\d|25[0-5])"
    r"(\.(\d{1,2}|1\d\d|2[0-4]\d|25[0-5])){2}"
    r"(?:\.([0-9]\d?|1\d\d|2[0-4]\d|25[0-5]))"
)
_URL_LABEL = r"[a-zA-Z0-9\u00a1-\uffff](?:[a-zA-Z0-9\u00a1-\uffff_-]*[a-zA-Z0-9\u00a1-\uffff])?"
_URL_HOST = r"(" + _URL_IP + r"|(\[[0-9a-fA-F:.]+\])|(" + _URL_LABEL + r"(?:\." + _URL_LABEL + r")*))"
_URL_PORT = r"(:(\d{1,5}))"
_URL_PATH = r"((/|\?|#)[^\s]*)"
_URL = re.compile(
    "^" + _URL_SCHEMA + "?" + _URL_USERNAME + "?" + _URL_HOST + r"\.?" + _URL_PORT + "?" + _URL_PATH + "?$"
)


def non_empty(value: str | None) -> bool:
    return bool(value and value.strip())


def max_length(value: str, limit: int) -> bool:
    """True when ``value`` fits within ``limit`` characters."""
    return len(value) <= limit


def in_range(value: int, lo: int, hi: int) -> bool:
    return lo <= value <= hi


def is_member(value: str, allowed: Collection[str]) -> bool:
    return value in allowed


def is_valid_hex_color(value: str) -> bool:
    return bool(_HEX_COLOR.match(value))


def is_valid_name_pattern(value: str) -> bool:
    # Punctuation alone ("- '.,") is not a name.
    if not _NAME.match(value):
        return False
    return any(ch.isalnum() for ch in value)


def is_valid_postal_code(value: str) -> bool:
    return bool(_POSTAL_CODE.match(value))


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def is_valid_url(value: str) -> bool:
    if not value or len(value) >= MAX_URL_LENGTH or len(value) <= MIN_URL_LENGTH:
        return False
    if value.startswith("."):
        return False

    candidate = value
    if ":" in value and "://" not in value:
        candidate = "http://" + value
    try:
        parts = urlsplit(candidate)
        # Accessing .port validates the numeric range.
        parts.port
    except ValueError:
        return False
    if parts.netloc.startswith("."):
        return False
    if not parts.netloc and parts.path and "." not in parts.path:
        return False

    return bool(_URL.match(value))


def is_valid_uuid(value: str) -> bool:
    try:
        uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return False
    return True


def escape_html(value: str) -> str:
    return html.escape(value).strip()
