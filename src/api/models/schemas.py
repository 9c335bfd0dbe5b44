"""Pydantic schemas for the Cloud Snippets API."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field


DeidentifyMode = Literal["mask", "redact", "replace_info_type", "replace_value", "date_shift"]


class InspectRequest(BaseModel):
    text: str
    info_types: Optional[List[str]] = None
    min_likelihood: Optional[str] = None
    max_findings: Optional[int] = Field(None, ge=0)
    excluded_substrings: Optional[List[str]] = None


class FindingResponse(BaseModel):
    quote: str
    info_type: str
    likelihood: str


class InspectResponse(BaseModel):
    total_findings: int = Field(..., ge=0)
    findings: List[FindingResponse] = Field(default_factory=list)
    report: str = ""


class DeidentifyRequest(BaseModel):
    text: str
    mode: DeidentifyMode = "replace_info_type"
    info_types: Optional[List[str]] = None
    masking_character: Optional[str] = None
    number_to_mask: int = 0
    replacement: Optional[str] = None
    lower_bound_days: Optional[int] = None
    upper_bound_days: Optional[int] = None


class DeidentifyResponse(BaseModel):
    mode: DeidentifyMode
    output: str
    report: str = ""


class ErrorResponse(BaseModel):
    error: str
    message: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    timestamp: datetime
    project_id: str = ""
    client_transport: str = "grpc"


class ReadyzResponse(BaseModel):
    status: str
    checks: dict[str, str] = Field(default_factory=dict)
