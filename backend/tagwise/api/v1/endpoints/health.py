from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from tagwise.db.base import create_request_supabase_client
from tagwise.dependencies import get_app_settings

if TYPE_CHECKING:
    from tagwise.config import Settings

router = APIRouter()


@router.get("/")
async def health_check():
    """Health check endpoint."""
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy",
            "service": "tagwise-api",
            "version": "0.1.0",
        },
    )


@router.get("/ready")
async def readiness_check(request: Request, settings: Settings = Depends(get_app_settings)):
    """Readiness check endpoint. Reports store and cache reachability without failing."""
    db_status = "connected"
    try:
        client = create_request_supabase_client(settings)
        await asyncio.to_thread(lambda: client.table("tags").select("id").limit(1).execute())
    except Exception as e:
        db_status = f"error: {e}"

    cache_status = "connected"
    try:
        await request.app.state.redis.ping()
    except Exception as e:
        cache_status = f"error: {e}"

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ready",
            "database": db_status,
            "cache": cache_status,
            "api_prefix": settings.api_prefix,
        },
    )
