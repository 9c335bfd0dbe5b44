"""Update a Video Stitcher CDN key."""

import logging
from typing import Callable, TextIO, Tuple, Union

from google.cloud.video import stitcher_v1
from google.protobuf import field_mask_pb2

from .errors import ConfigurationError, remote_call
from .factory import build_stitcher_client, open_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], stitcher_v1.VideoStitcherServiceClient]

DEFAULT_LOCATION = "us-central1"


def build_cdn_key_update(
    project_id: str,
    key_id: str,
    hostname: str,
    key_name: str,
    private_key: Union[str, bytes],
    is_media_cdn: bool,
    location: str = DEFAULT_LOCATION,
) -> Tuple[stitcher_v1.CdnKey, field_mask_pb2.FieldMask]:
    """CdnKey for the chosen variant plus the mask naming exactly what changes."""
    operation = "build_cdn_key_update"
    for field, value in (
        ("project_id", project_id),
        ("key_id", key_id),
        ("location", location),
        ("hostname", hostname),
        ("key_name", key_name),
        ("private_key", private_key),
    ):
        if not value:
            raise ConfigurationError(operation, f"{field} must not be empty")

    if isinstance(private_key, str):
        private_key = private_key.encode("utf-8")

    cdn_key = stitcher_v1.CdnKey(
        name=f"projects/{project_id}/locations/{location}/cdnKeys/{key_id}",
        hostname=hostname,
    )
    if is_media_cdn:
        cdn_key.media_cdn_key = stitcher_v1.MediaCdnKey(key_name=key_name, private_key=private_key)
        variant = "media_cdn_key"
    else:
        cdn_key.google_cdn_key = stitcher_v1.GoogleCdnKey(key_name=key_name, private_key=private_key)
        variant = "google_cdn_key"
    return cdn_key, field_mask_pb2.FieldMask(paths=["hostname", variant])


def update_cdn_key(
    w: TextIO,
    project_id: str,
    key_id: str,
    hostname: str,
    key_name: str,
    private_key: Union[str, bytes],
    is_media_cdn: bool,
    location: str = DEFAULT_LOCATION,
    *,
    client_factory: ClientFactory = build_stitcher_client,
) -> stitcher_v1.CdnKey:
    """Replace the hostname and signing key of an existing CDN key."""
    operation = "update_cdn_key"
    cdn_key, update_mask = build_cdn_key_update(
        project_id, key_id, hostname, key_name, private_key, is_media_cdn, location
    )

    with open_client(client_factory, operation) as client, remote_call("UpdateCdnKey"):
        logger.info("%s: updating %s (%s)", operation, cdn_key.name, update_mask.paths[1])
        response = client.update_cdn_key(cdn_key=cdn_key, update_mask=update_mask).result()

    print(f"Updated CDN key: {response.name}", file=w)
    return response
