from __future__ import annotations

from cryptography.fernet import Fernet, InvalidToken

from partner_service.core.config import settings
from partner_service.core.errors import CredentialError


def credentials_key() -> str:
    return settings.credentials_encryption_key.get_secret_value()


def _fernet(key: str) -> Fernet:
    try:
        return Fernet(key.encode("utf-8"))
    except (ValueError, TypeError) as e:
        raise CredentialError(f"invalid encryption key: {e}") from e


def encrypt_value(value: str, key: str) -> str:
    token = _fernet(key).encrypt(value.encode("utf-8"))
    return token.decode("utf-8")


def decrypt_value(token: str, key: str) -> str:
    """
    Decrypt a token produced by encrypt_value.

    Raises InvalidToken when the key does not match or the token was tampered
    with, and CredentialError when the key itself is malformed.
    """
    raw = _fernet(key).decrypt(token.encode("utf-8"))
    return raw.decode("utf-8")


__all__ = ["InvalidToken", "credentials_key", "decrypt_value", "encrypt_value"]
