"""Fetch a KMS public key, verify it arrived intact and export it as a JWK."""

import json
import logging
from typing import Callable, TextIO

import google_crc32c
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from google.cloud import kms
from jwcrypto import jwk

from .errors import ConfigurationError, IntegrityError, remote_call
from .factory import build_kms_client, open_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], kms.KeyManagementServiceClient]


def get_public_key_jwk(
    w: TextIO,
    key_version_name: str,
    *,
    client_factory: ClientFactory = build_kms_client,
) -> dict:
    """Print and return the public half of ``key_version_name`` in JWK form.

    The PEM is checked against the CRC32C the service sent with it before
    it is parsed; either failure raises IntegrityError.
    """
    operation = "get_public_key_jwk"
    if not key_version_name:
        raise ConfigurationError(operation, "key version name must not be empty")

    with open_client(client_factory, operation) as client, remote_call("GetPublicKey"):
        logger.info("%s: fetching public key for %s", operation, key_version_name)
        public_key = client.get_public_key(request={"name": key_version_name})

    pem = public_key.pem.encode("utf-8")
    if google_crc32c.value(pem) != public_key.pem_crc32c:
        logger.warning("%s: checksum mismatch for %s", operation, key_version_name)
        raise IntegrityError(operation, "response corrupted in-transit")

    try:
        key = serialization.load_pem_public_key(pem)
    except (ValueError, UnsupportedAlgorithm) as e:
        raise IntegrityError(operation, f"failed to parse public key: {e}") from e

    key_jwk = jwk.JWK.from_pyca(key).export_public(as_dict=True)
    print(f"The public key in JWK format: {json.dumps(key_jwk)}", file=w)
    return key_jwk
