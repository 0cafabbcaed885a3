from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from coursegrid.db.bootstrap import missing_schema
from coursegrid.db.session import engine

router = APIRouter()


@router.get("/health")
def health() -> dict:
    return {"status": "ok"}


@router.get("/health/live")
def health_live() -> dict:
    return {"status": "ok"}


@router.get("/health/ready")
def health_ready() -> JSONResponse:
    missing: list[str] = []
    error: str | None = None
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
            missing = missing_schema(connection)
    except SQLAlchemyError as exc:
        error = str(exc)

    ready = error is None and not missing
    payload = {
        "status": "ok" if ready else "degraded",
        "database": {"ok": error is None, "missing": missing, "error": error},
    }
    return JSONResponse(status_code=200 if ready else 503, content=payload)
