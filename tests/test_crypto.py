import pytest
from cryptography.fernet import Fernet

from partner_service.core.crypto import InvalidToken, decrypt_value, encrypt_value
from partner_service.core.errors import CredentialError
from partner_service.core.security import generate_client_credential, hash_string
from partner_service.services.redaction import REDACTED, redact_payload


def test_encrypt_decrypt_round_trip(fernet_key):
    token = encrypt_value("client-secret-1", fernet_key)
    assert token != "client-secret-1"
    assert decrypt_value(token, fernet_key) == "client-secret-1"


def test_decrypt_with_other_key_raises_invalid_token(fernet_key):
    token = encrypt_value("client-secret-1", fernet_key)
    other = Fernet.generate_key().decode("utf-8")
    with pytest.raises(InvalidToken):
        decrypt_value(token, other)


def test_malformed_key_is_a_credential_error():
    with pytest.raises(CredentialError):
        encrypt_value("x", "not-a-fernet-key")


def test_generated_credentials_are_distinct_sha256_hex():
    a = generate_client_credential()
    b = generate_client_credential()
    assert a != b
    assert len(a) == 64
    int(a, 16)


def test_hash_string_is_stable():
    assert hash_string("abc") == hash_string("abc")
    assert hash_string("abc") != hash_string("abd")


def test_redact_payload_masks_nested_gateway_secrets():
    payload = {
        "name": "Acme",
        "payment": {
            "payment_gateways": [
                {"gateway": "paypal", "client_id": "cid", "client_secret": "shh"},
            ],
        },
    }
    out = redact_payload(payload)

    gw = out["payment"]["payment_gateways"][0]
    assert gw["gateway"] == "paypal"
    assert gw["client_id"] == REDACTED
    assert gw["client_secret"] == REDACTED
    # input untouched
    assert payload["payment"]["payment_gateways"][0]["client_secret"] == "shh"


def test_redact_payload_extra_keys_are_case_insensitive():
    out = redact_payload({"Feed_Token": "t", "plain": 1}, extra_keys={"FEED_TOKEN"})
    assert out == {"Feed_Token": REDACTED, "plain": 1}
