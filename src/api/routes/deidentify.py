"""Content de-identification endpoint."""

import io
import logging

from fastapi import APIRouter, Depends, status
from starlette.requests import Request

from ..config import get_settings
from ..dependencies import get_dlp_client_factory
from ..models.schemas import DeidentifyRequest, DeidentifyResponse, ErrorResponse
from ..rate_limit import RATE_LIMIT, limiter

from cloud_snippets.dlp import deidentify as dlp_deidentify
from cloud_snippets.errors import ConfigurationError
from cloud_snippets.models.entities import DEFAULT_INFO_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["De-identification"])


@router.post(
    "/deidentify",
    response_model=DeidentifyResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="De-identify sensitive data in a string",
)
@limiter.limit(RATE_LIMIT)
def deidentify_text(
    request: Request,
    body: DeidentifyRequest,
    client_factory=Depends(get_dlp_client_factory),
) -> DeidentifyResponse:
    project_id = get_settings().gcp_project_id
    info_types = body.info_types or DEFAULT_INFO_TYPES
    out = io.StringIO()

    if body.mode == "mask":
        output = dlp_deidentify.deidentify_with_mask(
            out, project_id, body.text, info_types,
            masking_character=body.masking_character,
            number_to_mask=body.number_to_mask,
            client_factory=client_factory,
        )
    elif body.mode == "redact":
        output = dlp_deidentify.deidentify_with_redact(
            out, project_id, body.text, info_types, client_factory=client_factory
        )
    elif body.mode == "replace_value":
        output = dlp_deidentify.deidentify_with_replacement(
            out, project_id, body.text, info_types, body.replacement,
            client_factory=client_factory,
        )
    elif body.mode == "date_shift":
        if body.lower_bound_days is None or body.upper_bound_days is None:
            raise ConfigurationError("deidentify_date_shift", "lower_bound_days and upper_bound_days are required")
        output = dlp_deidentify.deidentify_date_shift(
            out, project_id, body.text, body.lower_bound_days, body.upper_bound_days,
            info_type_names=body.info_types,
            client_factory=client_factory,
        )
    else:
        output = dlp_deidentify.deidentify_with_replace_info_type(
            out, project_id, body.text, info_types, client_factory=client_factory
        )

    logger.info("De-identified %d characters with mode=%s", len(body.text), body.mode)
    return DeidentifyResponse(mode=body.mode, output=output, report=out.getvalue())
