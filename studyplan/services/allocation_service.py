"""Local study-time allocation heuristic and time-of-day block placement."""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import time
from typing import Optional, Sequence

from studyplan.domain.models import RawBlock, ScheduleBlock, Subject
from studyplan.domain.time_model import add_minutes
from studyplan.utils.logger import get_logger


logger = get_logger(__name__)

MIN_BLOCK_MINUTES = 10


def round_half_up(value: float) -> int:
    """Round non-negative values with ties away from zero (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def hours_to_minutes(total_hours: float) -> int:
    return round_half_up(max(0.0, total_hours) * 60.0)


def apply_focus_bonus(subjects: Sequence[Subject], focus: Optional[str]) -> list[Subject]:
    """Double the priority of every subject whose name matches ``focus`` ignoring case."""
    if focus is None:
        return list(subjects)
    focus_key = focus.lower()
    return [
        replace(subject, priority=subject.priority * 2)
        if subject.name.lower() == focus_key
        else subject
        for subject in subjects
    ]


def fit_minimums(subjects: Sequence[Subject], total_minutes: int) -> tuple[list[Subject], int]:
    """Shrink minimums into the budget, dropping low-priority subjects if needed.

    Returns the surviving subjects and the sum of their minimums. When the
    lowest-priority subjects had to be removed, survivors come back sorted by
    ascending priority.
    """
    sum_min = sum(subject.min_minutes for subject in subjects)
    if sum_min <= total_minutes:
        return list(subjects), sum_min

    factor = total_minutes / sum_min
    scaled = [
        replace(
            subject,
            min_minutes=max(round_half_up(subject.min_minutes * factor), MIN_BLOCK_MINUTES),
        )
        for subject in subjects
    ]
    sum_min = sum(subject.min_minutes for subject in scaled)
    if sum_min <= total_minutes:
        return scaled, sum_min

    scaled.sort(key=lambda subject: subject.priority)
    while sum_min > total_minutes and scaled:
        removed = scaled.pop(0)
        sum_min -= removed.min_minutes
        logger.debug(
            "Subject dropped to fit budget | subject=%s | priority=%s | min_minutes=%s",
            removed.name,
            removed.priority,
            removed.min_minutes,
        )
    return scaled, sum_min


def allocate(
    subjects: Sequence[Subject],
    total_minutes: int,
    focus: Optional[str] = None,
) -> list[RawBlock]:
    """Split ``total_minutes`` across subjects by minimum plus priority share."""
    candidates = apply_focus_bonus(subjects, focus)
    if not candidates or total_minutes <= 0:
        return []

    survivors, sum_min = fit_minimums(candidates, total_minutes)
    if not survivors:
        return []

    remaining = max(0, total_minutes - sum_min)
    total_weight = sum(subject.priority for subject in survivors)
    blocks = [RawBlock(subject_name=subject.name, minutes=subject.min_minutes) for subject in survivors]

    # Half-up shares in integer arithmetic; they may overshoot `remaining`,
    # only a shortfall (at most one minute per block) is corrected.
    if remaining > 0 and total_weight > 0:
        distributed = 0
        for block, subject in zip(blocks, survivors):
            extra = (2 * remaining * subject.priority + total_weight) // (2 * total_weight)
            block.minutes += extra
            distributed += extra

        index = 0
        while distributed < remaining:
            blocks[index % len(blocks)].minutes += 1
            distributed += 1
            index += 1

    return [block for block in blocks if block.minutes >= MIN_BLOCK_MINUTES]


def materialize(blocks: Sequence[RawBlock], start_time: time) -> list[ScheduleBlock]:
    """Place blocks back to back starting at ``start_time``."""
    cursor = start_time
    placed: list[ScheduleBlock] = []
    for block in blocks:
        end = add_minutes(cursor, block.minutes)
        placed.append(
            ScheduleBlock(
                start=cursor,
                end=end,
                subject_name=block.subject_name,
                minutes=block.minutes,
            )
        )
        cursor = end
    return placed
