"""
app.py — FastAPI application factory.

This is the ASGI application object imported by uvicorn.
It wires the plan generation service, registers routers, and maps
unexpected failures to a JSON error body.

Usage (via launcher):
    python main.py

Usage (direct uvicorn):
    uvicorn app:app --reload
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from studyplan.controllers.plan_controller import router as plan_router
from studyplan.services.plan_service import PlanGenerationService
from studyplan.services.remote_plan_service import RemotePlanAdapter
from studyplan.utils.config import Settings, get_settings
from studyplan.utils.logger import get_logger


logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    plan_service: Optional[PlanGenerationService] = None,
) -> FastAPI:
    """
    Build and wire the FastAPI application.

    The credential and remote endpoint settings are read once here and
    injected into the services through app.state.
    """
    settings = settings or get_settings()

    if plan_service is None:
        remote_adapter = RemotePlanAdapter.from_settings(settings)
        plan_service = PlanGenerationService(settings=settings, remote_adapter=remote_adapter)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
    )
    app.include_router(plan_router)
    _register_error_handlers(app)

    app.state.settings = settings
    app.state.plan_service = plan_service

    logger.info(
        "Application wired | remote_model=%s | remote_credential=%s",
        settings.remote_model,
        "configured" if settings.openai_api_key else "missing",
    )
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def invalid_payload_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.error("Rejected payload | path=%s | errors=%s", request.url.path, exc.errors())
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": f"Invalid request payload: {exc.errors()}"},
        )

    @app.exception_handler(Exception)
    async def unexpected_failure_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unexpected failure | path=%s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc)},
        )


# Module-level app object for uvicorn
app = create_app()
