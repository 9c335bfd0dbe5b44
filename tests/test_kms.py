"""Unit tests for KMS public-key retrieval and JWK export."""

import json

import google_crc32c
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from google.api_core import exceptions as core_exceptions
from google.cloud import kms

from cloud_snippets.errors import ConfigurationError, IntegrityError, RemoteServiceError
from cloud_snippets.kms import get_public_key_jwk

from conftest import PROJECT_ID

KEY_VERSION = (
    f"projects/{PROJECT_ID}/locations/global/keyRings/ring/cryptoKeys/signer/cryptoKeyVersions/1"
)


def _ec_pem() -> str:
    key = ec.generate_private_key(ec.SECP256R1())
    return key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")


def _public_key(pem: str, checksum=None) -> kms.PublicKey:
    if checksum is None:
        checksum = google_crc32c.value(pem.encode("utf-8"))
    return kms.PublicKey(pem=pem, pem_crc32c=checksum)


class TestGetPublicKeyJwk:
    def test_exports_public_jwk(self, out, fake_client, factory):
        fake_client.get_public_key.return_value = _public_key(_ec_pem())
        key_jwk = get_public_key_jwk(out, KEY_VERSION, client_factory=factory)

        fake_client.get_public_key.assert_called_once_with(request={"name": KEY_VERSION})
        assert key_jwk["kty"] == "EC"
        assert key_jwk["crv"] == "P-256"
        assert "d" not in key_jwk

        prefix = "The public key in JWK format: "
        printed = out.getvalue()
        assert printed.startswith(prefix)
        assert json.loads(printed[len(prefix):]) == key_jwk

    def test_checksum_mismatch(self, out, fake_client, factory):
        pem = _ec_pem()
        fake_client.get_public_key.return_value = _public_key(
            pem, google_crc32c.value(pem.encode("utf-8")) ^ 1
        )
        with pytest.raises(IntegrityError, match="corrupted"):
            get_public_key_jwk(out, KEY_VERSION, client_factory=factory)
        assert out.getvalue() == ""
        fake_client.__exit__.assert_called_once()

    def test_unparsable_pem(self, out, fake_client, factory):
        fake_client.get_public_key.return_value = _public_key("-----BEGIN PUBLIC KEY-----\nnope\n-----END PUBLIC KEY-----\n")
        with pytest.raises(IntegrityError, match="parse"):
            get_public_key_jwk(out, KEY_VERSION, client_factory=factory)

    def test_name_required(self, out, factory):
        with pytest.raises(ConfigurationError):
            get_public_key_jwk(out, "", client_factory=factory)
        factory.assert_not_called()

    def test_remote_failure(self, out, fake_client, factory):
        fake_client.get_public_key.side_effect = core_exceptions.NotFound("no such key")
        with pytest.raises(RemoteServiceError) as exc_info:
            get_public_key_jwk(out, KEY_VERSION, client_factory=factory)
        assert exc_info.value.operation == "GetPublicKey"
        fake_client.__exit__.assert_called_once()
