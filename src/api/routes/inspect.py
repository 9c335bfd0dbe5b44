"""Content inspection endpoint."""

import io
import logging

from fastapi import APIRouter, Depends, status
from starlette.requests import Request

from ..config import get_settings
from ..dependencies import get_dlp_client_factory
from ..models.schemas import ErrorResponse, FindingResponse, InspectRequest, InspectResponse
from ..rate_limit import RATE_LIMIT, limiter

from cloud_snippets.dlp import inspect as dlp_inspect

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["Inspection"])


@router.post(
    "/inspect",
    response_model=InspectResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Find sensitive data in a string",
)
@limiter.limit(RATE_LIMIT)
def inspect_text(
    request: Request,
    body: InspectRequest,
    client_factory=Depends(get_dlp_client_factory),
) -> InspectResponse:
    settings = get_settings()
    out = io.StringIO()

    findings = dlp_inspect.inspect_string(
        out,
        settings.gcp_project_id,
        body.text,
        info_type_names=body.info_types,
        min_likelihood=body.min_likelihood,
        max_findings=body.max_findings,
        excluded_substrings=body.excluded_substrings,
        client_factory=client_factory,
    )

    logger.info("Inspection returned %d findings", len(findings))
    return InspectResponse(
        total_findings=len(findings),
        findings=[FindingResponse(**f.to_dict()) for f in findings],
        report=out.getvalue(),
    )
