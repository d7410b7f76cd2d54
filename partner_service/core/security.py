import base64
import hashlib
import secrets
import time

from partner_service.core.consts import CREDENTIAL_BYTE_SIZE


def generate_client_credential(byte_size: int = CREDENTIAL_BYTE_SIZE) -> str:
    # Random alphanumerics + nanosecond timestamp, hashed to a fixed-width hex string.
    raw = base64.b64encode(secrets.token_bytes(byte_size)).decode("ascii")
    clean = "".join(ch for ch in raw if ch.isascii() and ch.isalnum())
    return hash_string(f"{clean}{time.time_ns()}")


def hash_string(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()
