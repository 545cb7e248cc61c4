"""Liveness and readiness probes.

``/health/simple`` answers as long as the process serves requests.
``/health`` also pings the account database and reports whether the AI
backends are configured; the remote APIs themselves are not called since
every probe would be billed.
"""

from __future__ import annotations

import logging
from typing import Dict

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from flashcard_api.core.config import settings
from flashcard_api.db.database import ping_db

logger = logging.getLogger(__name__)
router = APIRouter()


def _overall(components: Dict[str, str]) -> str:
    if components["database"] == "error":
        return "unhealthy"
    if all(state == "ok" for state in components.values()):
        return "healthy"
    return "degraded"


@router.get("/health")
async def health_check():
    components = {
        "database": "ok",
        "generation": "ok" if settings.OPENAI_API_KEY else "warning",
        "transcription": "ok" if settings.TRANSCRIPTION_API_KEY else "warning",
    }

    try:
        await ping_db()
    except Exception as exc:
        logger.error("Database ping failed: %s", exc)
        components["database"] = "error"

    overall = _overall(components)
    return JSONResponse(
        content={**components, "overall": overall},
        status_code=503 if overall == "unhealthy" else 200,
    )


@router.get("/health/simple")
async def simple_health_check():
    return {"status": "ok"}
