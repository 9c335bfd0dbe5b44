"""Cloud Storage bucket settings."""

import logging
from typing import Callable, TextIO

from google.cloud import storage
from google.cloud.storage.constants import PUBLIC_ACCESS_PREVENTION_ENFORCED

from .errors import ConfigurationError, remote_call
from .factory import build_storage_client, open_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], storage.Client]

DEFAULT_TIMEOUT_SECONDS = 10.0


def set_public_access_prevention_enforced(
    w: TextIO,
    bucket_name: str,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    *,
    client_factory: ClientFactory = build_storage_client,
) -> None:
    """Block public access to ``bucket_name`` with a single PATCH request."""
    operation = "set_public_access_prevention_enforced"
    if not bucket_name:
        raise ConfigurationError(operation, "bucket name must not be empty")
    if timeout <= 0:
        raise ConfigurationError(operation, "timeout must be positive")

    with open_client(client_factory, operation) as client, remote_call("PatchBucket"):
        bucket = client.bucket(bucket_name)
        bucket.iam_configuration.public_access_prevention = PUBLIC_ACCESS_PREVENTION_ENFORCED
        logger.info("%s: patching gs://%s", operation, bucket_name)
        bucket.patch(timeout=timeout)

    print(f"Public access prevention is 'enforced' for {bucket_name}", file=w)
