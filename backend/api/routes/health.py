"""
api/routes/health.py
--------------------
GET /v1/health — liveness probe; also reports the planning zone so clients
can tell which local clock meal windows and opening hours are read in.
"""
from __future__ import annotations

from fastapi import APIRouter

import config

router = APIRouter()


@router.get("/health", summary="Health check")
def health() -> dict:
    return {
        "status": "ok",
        "service": "myday-planner",
        "planning_timezone": config.PLANNING_TIMEZONE,
    }
