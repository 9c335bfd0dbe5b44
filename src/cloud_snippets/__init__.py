"""Small, single-call snippets for Google Cloud DLP, KMS, Video Stitcher and Storage."""

from .errors import ConfigurationError, IntegrityError, RemoteServiceError, SnippetError
from .factory import (
    build_dlp_client,
    build_kms_client,
    build_stitcher_client,
    build_storage_client,
    open_client,
)
from .models.entities import Finding, JobState, JobSummary

__all__ = [
    "SnippetError",
    "ConfigurationError",
    "RemoteServiceError",
    "IntegrityError",
    "build_dlp_client",
    "build_kms_client",
    "build_stitcher_client",
    "build_storage_client",
    "open_client",
    "Finding",
    "JobState",
    "JobSummary",
]
