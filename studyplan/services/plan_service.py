"""Plan generation orchestration: remote attempt with local fallback."""

from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from studyplan.domain.models import PlanMode, PlanRequest, PlanResult, Subject, TimeBudget
from studyplan.domain.time_model import parse_time_or_default
from studyplan.services.allocation_service import allocate, hours_to_minutes, materialize
from studyplan.services.remote_plan_service import (
    RemotePlanAdapter,
    RemotePlanError,
    UnparsableContentError,
)
from studyplan.utils.config import Settings, get_settings
from studyplan.utils.logger import get_logger


logger = get_logger(__name__)

FALLBACK_START_TIME = time(8, 0)


def build_plan_request(
    *,
    subjects: Sequence[Subject],
    total_hours: float,
    start_time: Optional[str],
    focus: Optional[str],
    use_remote: bool,
    default_start_time: str = "08:00",
) -> PlanRequest:
    """Normalize caller input; an unparsable start time falls back to the default."""
    default_start = parse_time_or_default(default_start_time, FALLBACK_START_TIME)
    resolved_start = parse_time_or_default(start_time, default_start)
    return PlanRequest(
        subjects=list(subjects),
        total_hours=total_hours,
        budget=TimeBudget(
            total_minutes=hours_to_minutes(total_hours),
            start_time=resolved_start,
        ),
        focus=focus,
        use_remote=use_remote,
    )


class PlanGenerationService:
    """Produces a day plan, preferring the remote model when asked to."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        remote_adapter: Optional[RemotePlanAdapter] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._remote_adapter = remote_adapter or RemotePlanAdapter.from_settings(self._settings)

    @property
    def default_start_time(self) -> str:
        return self._settings.default_start_time

    def generate(self, request: PlanRequest) -> PlanResult:
        if request.use_remote:
            try:
                blocks = self._remote_adapter.request_plan(
                    subjects=request.subjects,
                    total_hours=request.total_hours,
                    start_time=request.budget.start_time,
                    focus=request.focus,
                )
            except RemotePlanError as exc:
                self._log_remote_failure(exc)
            else:
                logger.info("Plan generated | mode=%s | blocks=%s", PlanMode.REMOTE.value, len(blocks))
                return PlanResult(mode=PlanMode.REMOTE, blocks=blocks)

        return self.generate_local(request)

    def generate_local(self, request: PlanRequest) -> PlanResult:
        raw_blocks = allocate(
            request.subjects,
            request.budget.total_minutes,
            request.focus,
        )
        blocks = materialize(raw_blocks, request.budget.start_time)
        logger.info(
            "Plan generated | mode=%s | total_minutes=%s | blocks=%s",
            PlanMode.LOCAL.value,
            request.budget.total_minutes,
            len(blocks),
        )
        return PlanResult(mode=PlanMode.LOCAL, blocks=blocks)

    @staticmethod
    def _log_remote_failure(exc: RemotePlanError) -> None:
        if isinstance(exc, UnparsableContentError):
            logger.warning(
                (
                    "Remote plan failed, falling back to local | condition=%s | "
                    "detail=%s | diagnostic=%s | raw_text=%r"
                ),
                exc.condition,
                exc,
                exc.diagnostic,
                exc.raw_text,
            )
            return
        logger.warning(
            "Remote plan failed, falling back to local | condition=%s | detail=%s | body=%r",
            exc.condition,
            exc,
            getattr(exc, "body", None),
        )
