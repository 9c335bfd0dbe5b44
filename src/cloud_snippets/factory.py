"""Factories for the Google Cloud clients used by the snippets."""

import contextlib
import logging
from typing import Callable, Iterator, Optional, TypeVar

from google.auth import exceptions as auth_exceptions
from google.cloud import dlp_v2, kms, storage
from google.cloud.video import stitcher_v1

from .errors import ConfigurationError, RemoteServiceError

logger = logging.getLogger(__name__)

VALID_TRANSPORTS = ("grpc", "rest")

ClientT = TypeVar("ClientT")


def _check_transport(transport: str) -> None:
    if transport not in VALID_TRANSPORTS:
        raise ConfigurationError(
            "build_client",
            f"transport must be one of {VALID_TRANSPORTS}, got {transport!r}",
        )


def build_dlp_client(
    transport: str = "grpc",
    credentials_file: Optional[str] = None,
) -> dlp_v2.DlpServiceClient:
    """Build a DLP client using ADC, or a service-account file when given."""
    _check_transport(transport)
    if credentials_file:
        return dlp_v2.DlpServiceClient.from_service_account_file(
            credentials_file, transport=transport
        )
    return dlp_v2.DlpServiceClient(transport=transport)


def build_kms_client(
    transport: str = "grpc",
    credentials_file: Optional[str] = None,
) -> kms.KeyManagementServiceClient:
    """Build a Cloud KMS client."""
    _check_transport(transport)
    if credentials_file:
        return kms.KeyManagementServiceClient.from_service_account_file(
            credentials_file, transport=transport
        )
    return kms.KeyManagementServiceClient(transport=transport)


def build_stitcher_client(
    transport: str = "grpc",
    credentials_file: Optional[str] = None,
) -> stitcher_v1.VideoStitcherServiceClient:
    """Build a Video Stitcher client."""
    _check_transport(transport)
    if credentials_file:
        return stitcher_v1.VideoStitcherServiceClient.from_service_account_file(
            credentials_file, transport=transport
        )
    return stitcher_v1.VideoStitcherServiceClient(transport=transport)


def build_storage_client(credentials_file: Optional[str] = None) -> storage.Client:
    """Build a Cloud Storage client (JSON API only, so no transport choice)."""
    if credentials_file:
        return storage.Client.from_service_account_json(credentials_file)
    return storage.Client()


@contextlib.contextmanager
def open_client(factory: Callable[[], ClientT], operation: str) -> Iterator[ClientT]:
    """Acquire a client for one call and release it on success or failure.

    GAPIC clients release their transport through the context-manager
    protocol; anything else is expected to expose ``close()``.
    """
    try:
        client = factory()
    except auth_exceptions.GoogleAuthError as e:
        logger.warning("%s: could not create client: %s", operation, e)
        raise RemoteServiceError(operation, e) from e

    with contextlib.ExitStack() as stack:
        if hasattr(type(client), "__exit__"):
            stack.enter_context(client)
        else:
            stack.callback(client.close)
        yield client
