"""Shared FastAPI dependency providers for the controller layer."""

from __future__ import annotations

from fastapi import HTTPException, Request, status

from studyplan.services.plan_service import PlanGenerationService


def get_plan_service(request: Request) -> PlanGenerationService:
    service = getattr(request.app.state, "plan_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Plan service is not initialized",
        )
    return service
