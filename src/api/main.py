"""FastAPI application exposing the DLP snippets over HTTP."""

import logging
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version, PackageNotFoundError

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from cloud_snippets.errors import ConfigurationError, RemoteServiceError

from .config import get_settings, load_settings
from .logging_config import setup_logging
from .middleware import RequestIDMiddleware
from .models.schemas import ErrorResponse
from .rate_limit import limiter
from .routes import deidentify_router, health_router, inspect_router

logger = logging.getLogger(__name__)


def _get_version() -> str:
    try:
        return pkg_version("cloud-snippets")
    except PackageNotFoundError:
        return "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = load_settings()
    setup_logging(log_level=settings.log_level, log_format=settings.log_format)
    logger.info("Starting Cloud Snippets API")
    logger.info(
        "project=%s, transport=%s",
        settings.gcp_project_id or "<unset>", settings.client_transport,
    )
    yield
    logger.info("Shutting down")


app = FastAPI(
    title="Cloud Snippets API",
    description="Inspects and de-identifies text with Google Cloud Data Loss Prevention.",
    version=_get_version(),
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

settings = get_settings()
allow_all = settings.cors_origins_list == ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=not allow_all,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.warning("Rejected request: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(error="invalid_configuration", message=str(exc)).model_dump(),
    )


@app.exception_handler(RemoteServiceError)
async def remote_service_error_handler(request: Request, exc: RemoteServiceError):
    logger.error("Remote call failed: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content=ErrorResponse(
            error="remote_service_error",
            message=str(exc),
            detail=str(exc.code) if exc.code is not None else None,
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_server_error",
            "message": "An unexpected error occurred.",
            "detail": str(exc) if logger.level <= logging.DEBUG else None,
        },
    )


app.include_router(health_router)
app.include_router(inspect_router)
app.include_router(deidentify_router)


def main():
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    main()
