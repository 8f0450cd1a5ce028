"""
main.py — Server launcher and entry point.

Run this file to start the study plan API:

    python main.py

Host and port come from HOST / PORT (default 0.0.0.0:10000); the remote
planner needs OPENAI_API_KEY, otherwise every plan is built locally.

This file does NOT contain application logic. See app.py for the FastAPI
application and service wiring.

Direct uvicorn usage:
    uvicorn app:app --reload
"""

from __future__ import annotations

import uvicorn

from studyplan.utils.config import get_settings


def main() -> None:
    """Start the study plan API server."""
    settings = get_settings()
    print("=" * 60)
    print(f"  {settings.app_name} v{settings.app_version}")
    print("=" * 60)
    print(f"  Server   : http://{settings.host}:{settings.port}")
    print(f"  Endpoint : POST http://{settings.host}:{settings.port}/api/plan")
    print(f"  API docs : http://{settings.host}:{settings.port}/docs")
    print(f"  Remote   : {'enabled' if settings.openai_api_key else 'no OPENAI_API_KEY, local only'}")
    print("=" * 60)
    print("  Press CTRL+C to stop\n")

    uvicorn.run(
        "app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
