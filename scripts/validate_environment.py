#!/usr/bin/env python3
"""Validate local study-planner environment readiness."""

from __future__ import annotations

import importlib
import sys
from dataclasses import replace
from datetime import time
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from studyplan.domain.constraints import RemotePlanConfig, validate_remote_config
from studyplan.domain.models import PlanMode, Subject
from studyplan.services.plan_service import PlanGenerationService, build_plan_request
from studyplan.services.remote_plan_service import RemotePlanAdapter
from studyplan.utils.config import get_settings

SEPARATOR_LINE = "=" * 44


def _print_result(name: str, success: bool, detail: str = "") -> tuple[bool, str]:
    if success:
        return True, f"[PASS] {name}{detail}"
    return False, f"[FAIL] {name}: {detail}"


def main() -> int:
    results: list[str] = []
    all_passed = True

    # CHECK 1 — Python version >= 3.10
    if sys.version_info >= (3, 10):
        ok, line = _print_result("Python " + sys.version.split()[0], True)
    else:
        ok, line = _print_result(
            "Python version >= 3.10",
            False,
            f"found {sys.version.split()[0]}",
        )
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 2 — Required packages importable
    package_names = ["fastapi", "uvicorn", "pydantic", "requests", "dotenv", "httpx", "pytest"]
    import_errors: list[str] = []
    for module_name in package_names:
        try:
            importlib.import_module(module_name)
        except Exception as exc:  # pragma: no cover - runtime guard
            import_errors.append(f"{module_name} ({exc})")
    if import_errors:
        ok, line = _print_result(
            "Required packages",
            False,
            "missing/unimportable -> " + "; ".join(import_errors),
        )
    else:
        ok, line = _print_result("Required packages: all importable", True)
    results.append(line)
    all_passed = all_passed and ok

    settings = get_settings()

    # CHECK 3 — Remote settings
    try:
        validate_remote_config(
            RemotePlanConfig(
                model=settings.remote_model,
                endpoint=settings.remote_endpoint,
                max_output_tokens=settings.remote_max_output_tokens,
                timeout_seconds=settings.remote_timeout_seconds,
            )
        )
        credential = "configured" if settings.openai_api_key else "missing (local only)"
        ok, line = _print_result("Remote settings", True, f": OPENAI_API_KEY {credential}")
    except ValueError as exc:
        ok, line = _print_result("Remote settings", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    # CHECK 4 — Local plan smoke run (no network)
    try:
        offline_settings = replace(settings, openai_api_key=None)
        service = PlanGenerationService(
            settings=offline_settings,
            remote_adapter=RemotePlanAdapter.from_settings(offline_settings),
        )
        plan_request = build_plan_request(
            subjects=[Subject("Math", 3, 30), Subject("History", 1, 20)],
            total_hours=1.0,
            start_time="08:00",
            focus=None,
            use_remote=True,
        )
        result = service.generate(plan_request)
        if result.mode is not PlanMode.LOCAL:
            raise RuntimeError(f"expected local fallback, got {result.mode.value}")
        if [block.minutes for block in result.blocks] != [38, 23]:
            raise RuntimeError(f"unexpected block minutes {[b.minutes for b in result.blocks]}")
        if result.blocks[-1].end != time(9, 1):
            raise RuntimeError("unexpected plan end time")
        ok, line = _print_result("Local fallback plan", True, ": 08:00-09:01, 2 blocks")
    except Exception as exc:
        ok, line = _print_result("Local fallback plan", False, str(exc))
    results.append(line)
    all_passed = all_passed and ok

    print(SEPARATOR_LINE)
    print(" Study Planner Environment Validation")
    print(SEPARATOR_LINE)
    for line in results:
        print(f" {line}")
    print(SEPARATOR_LINE)
    if all_passed:
        print(" All checks passed. Environment is ready.")
        print(SEPARATOR_LINE)
        return 0
    print(" One or more checks failed.")
    print(SEPARATOR_LINE)
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
