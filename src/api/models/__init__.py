"""Pydantic models for API request/response schemas."""

from .schemas import (
    DeidentifyMode,
    InspectRequest,
    InspectResponse,
    FindingResponse,
    DeidentifyRequest,
    DeidentifyResponse,
    ErrorResponse,
    HealthResponse,
    ReadyzResponse,
)

__all__ = [
    "DeidentifyMode",
    "InspectRequest",
    "InspectResponse",
    "FindingResponse",
    "DeidentifyRequest",
    "DeidentifyResponse",
    "ErrorResponse",
    "HealthResponse",
    "ReadyzResponse",
]
