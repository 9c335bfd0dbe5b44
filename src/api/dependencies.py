"""FastAPI dependencies that hand routes a configured DLP client factory."""

import functools
from typing import Callable

from google.cloud import dlp_v2

from cloud_snippets.factory import build_dlp_client

from .config import get_settings


def get_dlp_client_factory() -> Callable[[], dlp_v2.DlpServiceClient]:
    settings = get_settings()
    return functools.partial(
        build_dlp_client,
        transport=settings.client_transport,
        credentials_file=settings.credentials_file,
    )
