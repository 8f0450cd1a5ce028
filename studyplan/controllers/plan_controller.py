"""HTTP controller layer for study-plan generation."""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, status
from pydantic import AliasChoices, BaseModel, Field, field_validator

from studyplan.controllers.dependencies import get_plan_service
from studyplan.domain.models import PlanResult, Subject
from studyplan.domain.time_model import format_time_of_day
from studyplan.services.plan_service import PlanGenerationService, build_plan_request


router = APIRouter(prefix="/api", tags=["plan"])


class SubjectPayload(BaseModel):
    name: str = Field(min_length=1)
    priority: int = Field(ge=1)
    min_minutes: int = Field(ge=0)


class CreatePlanRequest(BaseModel):
    """Input DTO; start_time is kept as text so bad values can fall back."""

    total_hours: float = Field(ge=0.0, le=24.0)
    start_time: Optional[str] = None
    subjects: list[SubjectPayload]
    focus: Optional[str] = None
    use_remote: bool = Field(
        default=False,
        validation_alias=AliasChoices("use_remote", "use_ai"),
    )

    @field_validator("focus")
    @classmethod
    def blank_focus_is_absent(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None
        return value


class PlanBlockResponse(BaseModel):
    start: str
    end: str
    subject: str
    minutes: int = Field(ge=0)


class CreatePlanResponse(BaseModel):
    mode: Literal["remote", "local"]
    blocks: list[PlanBlockResponse]


def _to_response(result: PlanResult) -> CreatePlanResponse:
    return CreatePlanResponse(
        mode=result.mode.value,
        blocks=[
            PlanBlockResponse(
                start=format_time_of_day(block.start),
                end=format_time_of_day(block.end),
                subject=block.subject_name,
                minutes=block.minutes,
            )
            for block in result.blocks
        ],
    )


@router.post(
    "/plan",
    response_model=CreatePlanResponse,
    status_code=status.HTTP_200_OK,
)
def create_plan(
    payload: CreatePlanRequest,
    service: PlanGenerationService = Depends(get_plan_service),
) -> CreatePlanResponse:
    """Generate a day plan; remote failures silently become a local plan."""
    plan_request = build_plan_request(
        subjects=[
            Subject(name=item.name, priority=item.priority, min_minutes=item.min_minutes)
            for item in payload.subjects
        ],
        total_hours=payload.total_hours,
        start_time=payload.start_time,
        focus=payload.focus,
        use_remote=payload.use_remote,
        default_start_time=service.default_start_time,
    )
    return _to_response(service.generate(plan_request))
