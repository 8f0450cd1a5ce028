"""Domain models for study-plan generation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from enum import Enum


class PlanMode(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class Subject:
    name: str
    priority: int
    min_minutes: int


@dataclass(frozen=True)
class TimeBudget:
    total_minutes: int
    start_time: time


@dataclass
class RawBlock:
    """Subject/duration pair produced by the local allocator before placement."""

    subject_name: str
    minutes: int


@dataclass(frozen=True)
class ScheduleBlock:
    start: time
    end: time
    subject_name: str
    minutes: int


@dataclass(frozen=True)
class PlanRequest:
    subjects: list[Subject]
    total_hours: float
    budget: TimeBudget
    focus: str | None
    use_remote: bool


@dataclass(frozen=True)
class PlanResult:
    mode: PlanMode
    blocks: list[ScheduleBlock]
