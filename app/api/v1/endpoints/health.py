"""Health check endpoint for load balancers and monitoring."""

import os

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.db.session import get_db

router = APIRouter()


@router.get("")
async def health():
    """Simple liveness check. Optionally includes built_at if BACKEND_BUILT_AT env is set."""
    payload: dict = {"status": "ok"}
    built_at = os.environ.get("BACKEND_BUILT_AT")
    if built_at:
        payload["built_at"] = built_at
    return payload


@router.get("/ready")
async def readiness(request: Request, db: AsyncSession = Depends(get_db)):
    """Readiness: app + DB connectivity, plus vector store collection info when enabled."""
    payload: dict = {"status": "ok"}
    healthy = True
    try:
        await db.execute(text("SELECT 1"))
        payload["database"] = "connected"
    except Exception as e:
        healthy = False
        payload["database"] = str(e)

    vector_store = getattr(request.app.state, "vector_store", None)
    if vector_store is None:
        payload["vector_store"] = "disabled"
    else:
        try:
            payload["collection"] = await vector_store.collection_info()
            payload["vector_store"] = "connected"
        except StorageError as e:
            healthy = False
            payload["vector_store"] = e.message

    if not healthy:
        payload["status"] = "error"
        return JSONResponse(status_code=500, content=payload)
    return payload
