"""Health check endpoints."""

from datetime import datetime, timezone
from importlib.metadata import version as pkg_version, PackageNotFoundError
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..config import get_settings
from ..models.schemas import HealthResponse, ReadyzResponse

router = APIRouter(tags=["Health"])


def _safe_version() -> str:
    try:
        return pkg_version("cloud-snippets")
    except PackageNotFoundError:
        return "1.0.0"


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is running and healthy.",
)
async def health_check() -> HealthResponse:
    """Return service health status."""
    settings = get_settings()
    return HealthResponse(
        status="healthy",
        version=_safe_version(),
        timestamp=datetime.now(timezone.utc),
        project_id=settings.gcp_project_id,
        client_transport=settings.client_transport,
    )


@router.get(
    "/healthz",
    summary="Liveness probe",
    description="Liveness probe for container orchestrators.",
)
async def liveness() -> dict:
    """Return liveness status without checking anything."""
    return {"status": "alive"}


@router.get(
    "/readyz",
    response_model=ReadyzResponse,
    summary="Readiness probe",
    description="Readiness probe that checks the Google Cloud configuration.",
    responses={503: {"description": "Service not ready"}},
)
async def readiness() -> ReadyzResponse:
    """Check if the service has what it needs to call Google Cloud."""
    settings = get_settings()
    checks: dict[str, str] = {}
    all_ok = True

    if settings.gcp_project_id:
        checks["project"] = "ok"
    else:
        checks["project"] = "error: GCP_PROJECT_ID not set"
        all_ok = False

    # No key file means Application Default Credentials, resolved at call time.
    credentials_file = settings.credentials_file
    if credentials_file is None:
        checks["credentials"] = "ok (application default)"
    elif Path(credentials_file).is_file():
        checks["credentials"] = "ok"
    else:
        checks["credentials"] = f"error: {credentials_file} not found"
        all_ok = False

    response = ReadyzResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )

    if not all_ok:
        return JSONResponse(status_code=503, content=response.model_dump())

    return response
