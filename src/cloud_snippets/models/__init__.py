"""Data models for the snippets."""

from .entities import (
    DEFAULT_INFO_TYPES,
    DEFAULT_TABLE_HEADERS,
    DEFAULT_TABLE_ROWS,
    DLP_JOB_STATES,
    Finding,
    JobState,
    JobSummary,
)

__all__ = [
    "DEFAULT_INFO_TYPES",
    "DEFAULT_TABLE_HEADERS",
    "DEFAULT_TABLE_ROWS",
    "DLP_JOB_STATES",
    "Finding",
    "JobState",
    "JobSummary",
]
